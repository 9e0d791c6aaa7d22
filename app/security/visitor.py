"""
匿名访客身份：签发 / 读取 / 写 Cookie

访客没有账号，只靠一个长期 Cookie（默认 10 年）识别。
首次访问时生成一个 token，同一个值既用于初始化 Redis 中的空列表，
也写回 Cookie，二者必须一致，否则访客后续请求会找不到自己的列表。
"""

import uuid
from datetime import datetime, timedelta, timezone

import structlog
from fastapi import Request
from fastapi.responses import Response

from app.config import get_settings
from app.observability.metrics import VISITOR_ISSUED_TOTAL
from app.todo.store import TodoStore

log = structlog.get_logger()
settings = get_settings()


def new_visitor_id() -> str:
    """生成新的访客 token"""
    return str(uuid.uuid4())


class VisitorIdentityAssigner:
    """解析请求携带的访客身份，缺失时签发新身份并初始化空列表"""

    def __init__(self, store: TodoStore):
        self.store = store

    async def resolve(self, request_identity: str | None) -> tuple[str, bool]:
        """返回 (visitor_id, is_new)"""
        if request_identity and request_identity.strip():
            return request_identity, False

        visitor_id = new_visitor_id()
        await self.store.init_collection(visitor_id)
        VISITOR_ISSUED_TOTAL.inc()
        log.info("新访客，已分配身份", visitor_id=visitor_id)
        return visitor_id, True


def set_visitor_cookie(response: Response, visitor_id: str) -> None:
    """把访客 token 写回客户端，Expires = 当前时间 + VISITOR_COOKIE_TTL_DAYS"""
    expires = datetime.now(timezone.utc) + timedelta(days=settings.VISITOR_COOKIE_TTL_DAYS)
    response.set_cookie(settings.VISITOR_COOKIE_NAME, visitor_id, expires=expires)


async def get_visitor_id(request: Request) -> str | None:
    """FastAPI 依赖注入：读取请求 Cookie 中的访客 token（空白视为缺失）"""
    visitor_id = request.cookies.get(settings.VISITOR_COOKIE_NAME)
    if not visitor_id or not visitor_id.strip():
        return None
    return visitor_id

