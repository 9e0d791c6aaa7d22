"""
请求日志中间件：记录每个 HTTP 请求的开始/结束，并注入 trace_id / visitor_id

visitor_id 在这里从 Cookie 读取并绑定，是请求上下文的唯一绑定点：
BaseHTTPMiddleware 在复制出的 context 中执行路由，路由内绑定的变量回不到这里的"请求结束"日志。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import get_settings
from app.observability.context import bind_request_context

log = structlog.get_logger()
settings = get_settings()


def _cookie_visitor_id(request: Request) -> str | None:
    visitor_id = request.cookies.get(settings.VISITOR_COOKIE_NAME, "").strip()
    return visitor_id or None


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """HTTP 请求日志 + trace_id / visitor_id 上下文注入"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = bind_request_context(
            request.headers.get("X-Trace-ID"), _cookie_visitor_id(request)
        )
        start = time.monotonic()

        log.info("请求开始", method=request.method, path=request.url.path)

        response = await call_next(request)

        duration_ms = int((time.monotonic() - start) * 1000)
        log.info(
            "请求结束",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        # 响应头回传 trace_id 和耗时，便于前端 / 网关串联日志
        response.headers["X-Trace-ID"] = trace_id
        response.headers["X-Duration-Ms"] = str(duration_ms)

        return response
