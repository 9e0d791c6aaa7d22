"""
全局异常处理：存储故障 / 未知异常 → 通用 500，不向客户端泄露内部细节

领域层的前置条件失败（无身份、空文本、id 不存在）不走异常，
由 TodoService 以 TodoOutcome 返回，这里只处理基础设施故障。
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from app.observability.context import get_trace_id
from app.observability.metrics import ERROR_TOTAL
from app.todo.store import TodoStoreError

log = structlog.get_logger()

_GENERIC_MESSAGE = "Internal Server Error"


def register_error_handlers(app: FastAPI) -> None:
    """注册全局异常处理器"""

    @app.exception_handler(TodoStoreError)
    async def todo_store_error_handler(request: Request, exc: TodoStoreError):
        ERROR_TOTAL.labels(error_type="store_error").inc()
        log.error(
            "Todo 存储故障",
            path=request.url.path,
            error=str(exc),
            cause=repr(exc.cause),
        )
        return PlainTextResponse(
            _GENERIC_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers={"X-Trace-ID": get_trace_id()},
        )

    # Exception 处理器由 ServerErrorMiddleware 调用，位于所有自定义中间件之外：
    # 这类 500 不经过 RequestLogger / Metrics 中间件，只计入 ERROR_TOTAL，trace_id 在此手动回传
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        ERROR_TOTAL.labels(error_type="unknown").inc()
        log.error("未处理异常", path=request.url.path, error=str(exc), exc_info=True)
        trace_id = get_trace_id()
        return PlainTextResponse(
            _GENERIC_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers={"X-Trace-ID": trace_id} if trace_id else None,
        )
