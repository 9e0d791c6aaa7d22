"""
Todo 模块：访客级任务列表管理

提供 Redis 持久化的 TodoStore、生命周期引擎 TodoService
以及 TodoItem / TodoOutcome schema，供 /todos 系列接口使用。
"""

from app.todo.locks import VisitorLocks, visitor_locks
from app.todo.schemas import TodoItem, TodoOutcome, TodoStatus
from app.todo.service import TodoService
from app.todo.store import TodoStore, TodoStoreError

__all__ = [
    "TodoItem",
    "TodoOutcome",
    "TodoService",
    "TodoStatus",
    "TodoStore",
    "TodoStoreError",
    "VisitorLocks",
    "visitor_locks",
]
