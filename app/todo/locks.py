"""
访客级临界区：同一访客的"读 - 改 - 写"串行执行

remove / toggle 都是先读全量再覆盖写，没有互斥时并发请求会互相覆盖（后写者胜）。
每个访客一把 asyncio.Lock，按需创建，无人持有且无人等待时回收。

注意：锁只在单进程内有效，多 worker 部署时跨进程的竞争仍然存在。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class VisitorLocks:
    """按 visitor_id 分配的 asyncio.Lock 表"""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, visitor_id: str) -> AsyncIterator[None]:
        """进入访客临界区"""
        lock = self._locks.get(visitor_id)
        if lock is None:
            lock = self._locks[visitor_id] = asyncio.Lock()
        self._users[visitor_id] = self._users.get(visitor_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[visitor_id] -= 1
            if self._users[visitor_id] == 0:
                del self._users[visitor_id]
                del self._locks[visitor_id]

    def __len__(self) -> int:
        return len(self._locks)


# 单例（进程级，所有请求共享）
visitor_locks = VisitorLocks()
