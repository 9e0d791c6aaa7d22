"""
Todo Redis 存储层

每个访客独立存储，Key = todo:{visitor_id}，类型为 Redis List，
每个元素是一条 TodoItem 的 JSON。Key 不存在等价于空列表（Redis 不保留空 List）。

容错策略：
- 读不到 Key：返回空列表，不视为错误
- Redis 不可用 / 存量数据无法解析：统一抛 TodoStoreError，由应用层映射为 500
"""

import redis.asyncio as aioredis
import structlog
from pydantic import ValidationError
from redis.exceptions import RedisError

from app.cache.redis_client import RedisKeys
from app.todo.schemas import TodoItem

log = structlog.get_logger()


class TodoStoreError(Exception):
    """Todo 存储失败的应用级异常（唯一需要上抛到请求边界的错误）"""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class TodoStore:
    """访客级 Todo 列表的 Redis 读 / 追加 / 覆盖写"""

    def __init__(self, redis: aioredis.Redis):
        self.redis = redis

    def _key(self, visitor_id: str) -> str:
        return RedisKeys.todo(visitor_id)

    async def read_all(self, visitor_id: str) -> list[TodoItem]:
        """读取访客的完整 Todo 列表，不存在时返回空列表"""
        try:
            raw_items = await self.redis.lrange(self._key(visitor_id), 0, -1)
        except RedisError as e:
            log.error("TodoStore.read_all 失败", visitor_id=visitor_id, error=str(e))
            raise TodoStoreError("读取 Todo 列表失败", cause=e) from e

        try:
            return [TodoItem.model_validate_json(raw) for raw in raw_items]
        except ValidationError as e:
            log.error("Todo 存量数据无法解析", visitor_id=visitor_id, error=str(e))
            raise TodoStoreError("Todo 存量数据损坏", cause=e) from e

    async def append_one(self, visitor_id: str, item: TodoItem) -> None:
        """在列表末尾追加一条，Key 不存在时自动创建"""
        try:
            await self.redis.rpush(self._key(visitor_id), item.model_dump_json())
        except RedisError as e:
            log.error("TodoStore.append_one 失败", visitor_id=visitor_id, error=str(e))
            raise TodoStoreError("追加 Todo 失败", cause=e) from e

    async def replace_all(self, visitor_id: str, items: list[TodoItem]) -> None:
        """事务内 DEL + RPUSH，整体覆盖访客的 Todo 列表"""
        key = self._key(visitor_id)
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                if items:
                    pipe.rpush(key, *(item.model_dump_json() for item in items))
                await pipe.execute()
        except RedisError as e:
            log.error("TodoStore.replace_all 失败", visitor_id=visitor_id, error=str(e))
            raise TodoStoreError("覆盖写入 Todo 列表失败", cause=e) from e

    async def init_collection(self, visitor_id: str) -> None:
        """为新访客初始化空列表"""
        await self.replace_all(visitor_id, [])
