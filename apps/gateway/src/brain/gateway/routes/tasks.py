"""任务路由

POST   /api/v1/tasks                  创建任务（201）
GET    /api/v1/tasks                  任务列表，支持 project / status 筛选
GET    /api/v1/tasks/active           项目当前 active 任务
GET    /api/v1/tasks/queue            项目排队任务（按优先级）
GET    /api/v1/tasks/{id}             任务详情
POST   /api/v1/tasks/{id}/activate    激活（终态任务返回 400）
POST   /api/v1/tasks/{id}/complete    完成
POST   /api/v1/tasks/{id}/cancel      取消
DELETE /api/v1/tasks/{id}             删除
"""

from typing import Annotated

from brain.core.config import TASK_DESCRIPTION_MAX_LENGTH, TASK_TITLE_MAX_LENGTH
from brain.core.exceptions import (
    DomainError,
    ProjectRequiredError,
    TaskStateError,
    TitleRequiredError,
)
from brain.core.models import Priority, Task, TaskStatus, TrustLevel
from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from ..deps import get_task_service
from ..services.task_service import TaskService
from ._errors import error_response, not_found

router = APIRouter(prefix="/api/v1/tasks")

TaskId = Annotated[str, Path(max_length=100, pattern=r"^[A-Za-z0-9_-]+$")]


class CreateTaskRequest(BaseModel):
    """创建任务请求体"""

    title: str = Field(min_length=1, max_length=TASK_TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=TASK_DESCRIPTION_MAX_LENGTH)
    project: str = Field(min_length=1, max_length=100)
    trust_level: TrustLevel | None = None
    priority: Priority | None = None


class TaskListResponse(BaseModel):
    """任务列表响应"""

    tasks: list[Task]
    total: int
    limit: int
    offset: int


def _task_json(task: Task, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=task.model_dump(mode="json"))


@router.post("", status_code=201)
async def create_task(
    body: CreateTaskRequest,
    service: TaskService = Depends(get_task_service),
):
    """创建任务，初始状态 queued"""
    try:
        task = await service.create_task(
            title=body.title,
            project=body.project,
            description=body.description,
            trust_level=body.trust_level,
            priority=body.priority,
        )
    except ProjectRequiredError as e:
        return error_response(400, "PROJECT_REQUIRED", str(e))
    except TitleRequiredError as e:
        return error_response(400, "TITLE_REQUIRED", str(e))
    except DomainError as e:
        return error_response(400, "INVALID_TASK", str(e))
    return _task_json(task, status_code=201)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    project: str | None = Query(default=None, max_length=100),
    status: TaskStatus | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: TaskService = Depends(get_task_service),
):
    """任务列表，按 created_at 倒序"""
    page = await service.list_tasks(project, status, limit, offset)
    return TaskListResponse(
        tasks=page.data,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/active")
async def get_active_task(
    project: str = Query(min_length=1, max_length=100),
    service: TaskService = Depends(get_task_service),
):
    """项目当前 active 任务，没有时返回 404"""
    task = await service.get_active_task(project)
    if task is None:
        return error_response(
            404, "NO_ACTIVE_TASK", f"Project {project} has no active task"
        )
    return _task_json(task)


@router.get("/queue")
async def get_queued_tasks(
    project: str = Query(min_length=1, max_length=100),
    limit: int = Query(default=10, ge=1, le=100),
    service: TaskService = Depends(get_task_service),
):
    """项目排队任务：CRITICAL > HIGH > NORMAL > LOW，同级先创建先出"""
    tasks = await service.get_queued_tasks(project, limit)
    return {"tasks": [t.model_dump(mode="json") for t in tasks]}


@router.get("/{task_id}")
async def get_task(
    task_id: TaskId,
    service: TaskService = Depends(get_task_service),
):
    task = await service.get_task(task_id)
    if task is None:
        return not_found("task", task_id)
    return _task_json(task)


@router.post("/{task_id}/activate")
async def activate_task(
    task_id: TaskId,
    service: TaskService = Depends(get_task_service),
):
    """激活任务，同项目其他 active 任务降级为 queued"""
    try:
        task = await service.activate_task(task_id)
    except TaskStateError as e:
        return error_response(400, "TASK_STATE_INVALID", str(e), status=e.status)
    if task is None:
        return not_found("task", task_id)
    return _task_json(task)


@router.post("/{task_id}/complete")
async def complete_task(
    task_id: TaskId,
    service: TaskService = Depends(get_task_service),
):
    task = await service.complete_task(task_id)
    if task is None:
        return not_found("task", task_id)
    return _task_json(task)


@router.post("/{task_id}/cancel")
async def cancel_task(
    task_id: TaskId,
    service: TaskService = Depends(get_task_service),
):
    task = await service.cancel_task(task_id)
    if task is None:
        return not_found("task", task_id)
    return _task_json(task)


@router.delete("/{task_id}")
async def delete_task(
    task_id: TaskId,
    service: TaskService = Depends(get_task_service),
):
    deleted = await service.delete_task(task_id)
    if not deleted:
        return not_found("task", task_id)
    return {"deleted": True}
