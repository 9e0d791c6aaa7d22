"""
Todo 数据模型

TodoItem 为持久化单元：id / text 创建后不可变，completed 仅由 toggle 翻转。
TodoOutcome 为生命周期操作的结构化结果，让调用方区分"成功"与"静默空操作"。
"""

import uuid
from enum import Enum

from pydantic import BaseModel, Field


def new_todo_id() -> str:
    """生成新的 Todo id"""
    return str(uuid.uuid4())


class TodoItem(BaseModel):
    """单个 Todo 条目"""

    id: str = Field(default_factory=new_todo_id)
    text: str = Field(min_length=1)
    completed: bool = False

    def toggled(self) -> "TodoItem":
        """返回 completed 翻转后的副本，id / text 保持不变"""
        return self.model_copy(update={"completed": not self.completed})


class TodoStatus(str, Enum):
    """生命周期操作结果状态"""

    OK = "ok"
    MISSING_IDENTITY = "missing_identity"  # 请求未携带访客身份
    INVALID_INPUT = "invalid_input"  # text 为空或全为空白
    NOT_FOUND = "not_found"  # 目标 id 不在该访客的列表中


class TodoOutcome(BaseModel):
    """单次操作的结果：状态 + 受影响的条目（如有）"""

    status: TodoStatus
    item: TodoItem | None = None

    @property
    def ok(self) -> bool:
        return self.status is TodoStatus.OK

    @classmethod
    def success(cls, item: TodoItem | None = None) -> "TodoOutcome":
        return cls(status=TodoStatus.OK, item=item)

    @classmethod
    def noop(cls, status: TodoStatus) -> "TodoOutcome":
        return cls(status=status)
