"""项目上下文路由

GET    /api/v1/context/{project}   项目上下文 + 最近笔记 / Artifact
PUT    /api/v1/context/{project}   创建或更新（未提供的字段保持不变）
DELETE /api/v1/context/{project}   删除
GET    /api/v1/contexts            全部上下文
GET    /api/v1/projects            全部出现过的项目名
"""

from typing import Annotated

from brain.core.config import (
    CONTEXT_TEXT_MAX_LENGTH,
    TECH_STACK_ITEM_MAX_LENGTH,
    TECH_STACK_MAX_ITEMS,
)
from brain.core.models import ProjectContext
from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field

from ..deps import get_context_service
from ..services.context_service import ContextService
from ._errors import error_response

router = APIRouter(prefix="/api/v1")

ProjectName = Annotated[str, Path(min_length=1, max_length=100)]
TechStackItem = Annotated[str, Field(max_length=TECH_STACK_ITEM_MAX_LENGTH)]


class UpdateContextRequest(BaseModel):
    """更新项目上下文请求体"""

    summary: str | None = Field(default=None, max_length=CONTEXT_TEXT_MAX_LENGTH)
    tech_stack: list[TechStackItem] | None = Field(default=None, max_length=TECH_STACK_MAX_ITEMS)
    conventions: str | None = Field(default=None, max_length=CONTEXT_TEXT_MAX_LENGTH)


class ContextListResponse(BaseModel):
    contexts: list[ProjectContext]


class ProjectListResponse(BaseModel):
    projects: list[str]


def _invalid_project():
    return error_response(400, "INVALID_PROJECT", "Invalid project name")


@router.get("/context/{project}")
async def get_context(
    project: ProjectName,
    service: ContextService = Depends(get_context_service),
):
    """没有保存过上下文时返回 id=null 的空壳"""
    context = await service.get_context(project)
    if context is None:
        return _invalid_project()
    return context.model_dump(mode="json")


@router.put("/context/{project}")
async def update_context(
    project: ProjectName,
    body: UpdateContextRequest,
    service: ContextService = Depends(get_context_service),
):
    context = await service.update_context(
        project,
        summary=body.summary,
        tech_stack=body.tech_stack,
        conventions=body.conventions,
    )
    if context is None:
        return _invalid_project()
    return context.model_dump(mode="json")


@router.delete("/context/{project}")
async def delete_context(
    project: ProjectName,
    service: ContextService = Depends(get_context_service),
):
    if not await service.delete_context(project):
        return error_response(
            404,
            "CONTEXT_NOT_FOUND",
            f"Context for project {project} does not exist",
        )
    return {"deleted": True}


@router.get("/contexts", response_model=ContextListResponse)
async def list_contexts(service: ContextService = Depends(get_context_service)):
    return ContextListResponse(contexts=await service.list_contexts())


@router.get("/projects", response_model=ProjectListResponse)
async def list_projects(service: ContextService = Depends(get_context_service)):
    return ProjectListResponse(projects=await service.list_projects())
