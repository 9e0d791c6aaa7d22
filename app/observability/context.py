"""
请求上下文：trace_id / visitor_id 通过 contextvars 在协程间传播，
并同步绑定到 structlog，后续日志自动携带。
"""

import contextvars
import uuid

import structlog

# ── 全局上下文变量 ──
trace_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id", default="")


def new_trace_id() -> str:
    """生成新的 trace_id"""
    return str(uuid.uuid4())


def get_trace_id() -> str:
    return trace_id_var.get()


def bind_request_context(trace_id: str | None, visitor_id: str | None) -> str:
    """重置 structlog 上下文并绑定本次请求的 trace_id / visitor_id，返回生效的 trace_id

    trace_id 缺失时新生成；visitor_id 缺失（新访客）时不绑定。
    """
    trace_id = trace_id or new_trace_id()
    trace_id_var.set(trace_id)

    structlog.contextvars.clear_contextvars()
    bound = {"trace_id": trace_id}
    if visitor_id:
        bound["visitor_id"] = visitor_id
    structlog.contextvars.bind_contextvars(**bound)
    return trace_id
