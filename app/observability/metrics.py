"""
Prometheus 指标定义

所有指标统一在此文件定义，中间件和业务代码按需引用。
"""

from prometheus_client import Counter, Histogram

# ── 请求级指标 ──

REQUEST_TOTAL = Counter(
    "todo_request_total",
    "HTTP 请求总数",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "todo_request_duration_ms",
    "HTTP 请求耗时（毫秒）",
    ["method", "endpoint"],
    buckets=[5, 10, 25, 50, 100, 200, 500, 1000, 2000],
)

# ── 业务指标 ──

TODO_OP_TOTAL = Counter(
    "todo_op_total",
    "Todo 生命周期操作总数",
    ["op", "status"],  # op: create/remove/toggle; status: ok/missing_identity/invalid_input/not_found
)

VISITOR_ISSUED_TOTAL = Counter(
    "todo_visitor_issued_total",
    "新访客身份签发总数",
)

# ── 错误指标 ──

ERROR_TOTAL = Counter(
    "todo_error_total",
    "错误总数",
    ["error_type"],  # store_error/unknown
)
