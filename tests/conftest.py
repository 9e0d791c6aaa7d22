"""
测试公共 Fixture：内存 Redis 替身 + TodoStore / TodoService + FastAPI 测试客户端

不连接真实 Redis：get_redis 依赖被覆盖为 FakeRedis，lifespan 不会被 ASGITransport 触发。
"""

import os

# 环境变量优先于 app/.env，避免读到开发者本地配置
os.environ.setdefault("ENV", "test")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import pytest
from httpx import ASGITransport, AsyncClient

from app.cache.redis_client import get_redis
from app.main import app
from app.todo.locks import VisitorLocks
from app.todo.service import TodoService
from app.todo.store import TodoStore
from tests.fake_redis import FakeRedis


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store(fake_redis):
    return TodoStore(fake_redis)


@pytest.fixture
def service(store):
    return TodoService(store, VisitorLocks())


@pytest.fixture
async def client(fake_redis):
    """FastAPI 测试客户端，Redis 依赖替换为 FakeRedis"""

    async def override_get_redis():
        return fake_redis

    app.dependency_overrides[get_redis] = override_get_redis
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()

