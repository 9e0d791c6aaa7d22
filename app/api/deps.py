"""
FastAPI 依赖注入：TodoStore / TodoService / 访客身份签发器

Redis 客户端通过 get_redis 注入，测试中覆盖 get_redis 即可替换存储。
"""

import redis.asyncio as aioredis
from fastapi import Depends

from app.cache.redis_client import get_redis
from app.security.visitor import VisitorIdentityAssigner
from app.todo.locks import visitor_locks
from app.todo.service import TodoService
from app.todo.store import TodoStore


async def get_todo_store(redis: aioredis.Redis = Depends(get_redis)) -> TodoStore:
    return TodoStore(redis)


async def get_todo_service(store: TodoStore = Depends(get_todo_store)) -> TodoService:
    return TodoService(store, visitor_locks)


async def get_identity_assigner(
    store: TodoStore = Depends(get_todo_store),
) -> VisitorIdentityAssigner:
    return VisitorIdentityAssigner(store)
