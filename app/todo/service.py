"""
Todo 生命周期引擎：create / list / remove / toggle

每次操作都先从 TodoStore 重新读取当前状态，不跨请求缓存列表。
前置条件不满足（无访客身份、空文本、id 不存在）一律静默空操作，
以 TodoOutcome 的状态返回；只有 TodoStoreError 会向上抛出。

toggle 语义：去掉该条目后把翻转后的条目追加到末尾，整体一次覆盖写入，
即被切换的条目会移动到列表最后。
"""

import structlog

from app.observability.metrics import TODO_OP_TOTAL
from app.todo.locks import VisitorLocks
from app.todo.schemas import TodoItem, TodoOutcome, TodoStatus
from app.todo.store import TodoStore

log = structlog.get_logger()


def _record(op: str, outcome: TodoOutcome) -> TodoOutcome:
    TODO_OP_TOTAL.labels(op=op, status=outcome.status.value).inc()
    return outcome


class TodoService:
    """访客 Todo 列表的 CRUD 状态机"""

    def __init__(self, store: TodoStore, locks: VisitorLocks):
        self.store = store
        self.locks = locks

    async def list(self, visitor_id: str | None) -> list[TodoItem]:
        """读取访客的全部 Todo，无身份时返回空列表"""
        if not visitor_id:
            return []
        return await self.store.read_all(visitor_id)

    async def create(self, visitor_id: str | None, text: str | None) -> TodoOutcome:
        """新建一条未完成的 Todo 并追加到末尾"""
        if not visitor_id:
            return _record("create", TodoOutcome.noop(TodoStatus.MISSING_IDENTITY))
        if not text or not text.strip():
            return _record("create", TodoOutcome.noop(TodoStatus.INVALID_INPUT))

        item = TodoItem(text=text)
        async with self.locks.hold(visitor_id):
            await self.store.append_one(visitor_id, item)

        log.info("Todo 已创建", visitor_id=visitor_id, todo_id=item.id)
        return _record("create", TodoOutcome.success(item))

    async def remove(self, visitor_id: str | None, item_id: str | None) -> TodoOutcome:
        """删除指定 id 的 Todo，id 不存在时列表保持不变"""
        if not visitor_id:
            return _record("remove", TodoOutcome.noop(TodoStatus.MISSING_IDENTITY))
        if not item_id:
            return _record("remove", TodoOutcome.noop(TodoStatus.INVALID_INPUT))

        async with self.locks.hold(visitor_id):
            todos = await self.store.read_all(visitor_id)
            remaining = [t for t in todos if t.id != item_id]
            if len(remaining) == len(todos):
                return _record("remove", TodoOutcome.noop(TodoStatus.NOT_FOUND))
            await self.store.replace_all(visitor_id, remaining)
            removed = next(t for t in todos if t.id == item_id)

        log.info("Todo 已删除", visitor_id=visitor_id, todo_id=item_id)
        return _record("remove", TodoOutcome.success(removed))

    async def toggle(self, visitor_id: str | None, item_id: str | None) -> TodoOutcome:
        """翻转指定 Todo 的 completed，并将其移到列表末尾"""
        if not visitor_id:
            return _record("toggle", TodoOutcome.noop(TodoStatus.MISSING_IDENTITY))
        if not item_id:
            return _record("toggle", TodoOutcome.noop(TodoStatus.INVALID_INPUT))

        async with self.locks.hold(visitor_id):
            todos = await self.store.read_all(visitor_id)
            target = next((t for t in todos if t.id == item_id), None)
            if target is None:
                return _record("toggle", TodoOutcome.noop(TodoStatus.NOT_FOUND))

            # 去掉原条目 + 追加翻转后的条目，一次 MULTI 写入，失败时原列表不受影响
            toggled = target.toggled()
            await self.store.replace_all(
                visitor_id, [t for t in todos if t.id != item_id] + [toggled]
            )

        log.info(
            "Todo 状态已切换",
            visitor_id=visitor_id,
            todo_id=item_id,
            completed=toggled.completed,
        )
        return _record("toggle", TodoOutcome.success(toggled))
