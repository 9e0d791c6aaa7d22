"""
/todos 系列接口：htmx 片段的增 / 查 / 删 / 切换

端点：
- GET  /               — 整页（无 Cookie 时签发访客身份）
- GET  /todos          — 当前访客全部 Todo 片段
- POST /todos          — 新建 Todo，返回单条片段
- POST /remove/{id}    — 删除 Todo，空响应
- POST /complete/{id}  — 切换完成状态，空响应

前置条件不满足时一律返回 200 空响应；操作结果写入 X-Todo-Outcome 响应头。
"""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.api.deps import get_identity_assigner, get_todo_service
from app.security.visitor import (
    VisitorIdentityAssigner,
    get_visitor_id,
    set_visitor_cookie,
)
from app.todo.schemas import TodoOutcome
from app.todo.service import TodoService
from app.views.renderer import render_page, render_todo, render_todo_list

router = APIRouter(tags=["Todo"])
log = structlog.get_logger()

OUTCOME_HEADER = "X-Todo-Outcome"


def _fragment(body: str, outcome: TodoOutcome | None = None) -> HTMLResponse:
    response = HTMLResponse(body)
    if outcome is not None:
        response.headers[OUTCOME_HEADER] = outcome.status.value
    return response


async def _read_todo_text(request: Request) -> str | None:
    """兼容 form-urlencoded（htmx 默认）和 JSON 两种请求体"""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            return None
        value = body.get("todo") if isinstance(body, dict) else None
    else:
        form = await request.form()
        value = form.get("todo")
    return value if isinstance(value, str) else None


@router.get("/", response_class=HTMLResponse)
async def index(
    visitor_id: str | None = Depends(get_visitor_id),
    assigner: VisitorIdentityAssigner = Depends(get_identity_assigner),
):
    """整页入口：新访客在此获得身份 Cookie"""
    resolved_id, is_new = await assigner.resolve(visitor_id)
    response = HTMLResponse(render_page(title="Todo"))
    if is_new:
        set_visitor_cookie(response, resolved_id)
    return response


@router.get("/todos", response_class=HTMLResponse)
async def list_todos(
    visitor_id: str | None = Depends(get_visitor_id),
    service: TodoService = Depends(get_todo_service),
):
    """当前访客的 Todo 列表片段，无 Cookie 时为空"""
    todos = await service.list(visitor_id)
    return _fragment(render_todo_list(todos))


@router.post("/todos", response_class=HTMLResponse)
async def create_todo(
    request: Request,
    visitor_id: str | None = Depends(get_visitor_id),
    service: TodoService = Depends(get_todo_service),
):
    """新建 Todo，校验失败时返回空响应"""
    text = await _read_todo_text(request)
    outcome = await service.create(visitor_id, text)
    if not outcome.ok:
        log.info("新建 Todo 被忽略", status=outcome.status.value)
        return _fragment("", outcome)
    return _fragment(render_todo(outcome.item), outcome)


@router.post("/remove/{item_id}", response_class=HTMLResponse)
async def remove_todo(
    item_id: str,
    visitor_id: str | None = Depends(get_visitor_id),
    service: TodoService = Depends(get_todo_service),
):
    """删除 Todo；id 不存在视为空操作"""
    outcome = await service.remove(visitor_id, item_id)
    return _fragment("", outcome)


@router.post("/complete/{item_id}", response_class=HTMLResponse)
async def complete_todo(
    item_id: str,
    visitor_id: str | None = Depends(get_visitor_id),
    service: TodoService = Depends(get_todo_service),
):
    """切换 Todo 完成状态；id 不存在视为空操作"""
    outcome = await service.toggle(visitor_id, item_id)
    return _fragment("", outcome)
