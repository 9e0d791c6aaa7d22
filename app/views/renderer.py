"""
HTML 渲染：Jinja2 模板 → 整页 / htmx 片段

模板开启 autoescape，Todo 文本原样存储、渲染时转义。
"""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from app.todo.schemas import TodoItem

TEMPLATES = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def render_page(title: str = "Todo") -> str:
    """整页：新增表单 + 加载 /todos 的容器"""
    return TEMPLATES.get_template("index.html").render(title=title)


def render_todo(todo: TodoItem) -> str:
    """单条 Todo 片段（POST /todos 成功后追加到列表末尾）"""
    return TEMPLATES.get_template("todo_item.html").render(todo=todo)


def render_todo_list(todos: list[TodoItem]) -> str:
    """Todo 列表片段，空列表渲染为空字符串"""
    if not todos:
        return ""
    return TEMPLATES.get_template("todo_list.html").render(todos=todos)
