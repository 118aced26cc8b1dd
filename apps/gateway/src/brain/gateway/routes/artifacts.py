"""Artifact 路由"""

from typing import Annotated

from brain.core.config import CONTENT_MAX_LENGTH
from brain.core.models import Artifact, ContentType
from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from ..deps import get_artifact_service
from ..services.artifact_service import ArtifactService
from ._errors import not_found

router = APIRouter(prefix="/api/v1/artifacts")

ArtifactId = Annotated[str, Path(max_length=100)]


class CreateArtifactRequest(BaseModel):
    """创建 Artifact 请求体"""

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)
    content_type: ContentType
    language: str | None = Field(default=None, max_length=50)
    project: str | None = Field(default=None, max_length=100)
    source: str = Field(default="api", max_length=50)


class UpdateArtifactRequest(BaseModel):
    """更新 Artifact 请求体，未提供的字段保持不变"""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1, max_length=CONTENT_MAX_LENGTH)
    content_type: ContentType | None = None
    language: str | None = Field(default=None, max_length=50)
    project: str | None = Field(default=None, max_length=100)


class ArtifactListResponse(BaseModel):
    artifacts: list[Artifact]
    total: int
    limit: int
    offset: int


@router.post("", status_code=201, response_model=Artifact)
async def create_artifact(
    body: CreateArtifactRequest,
    service: ArtifactService = Depends(get_artifact_service),
):
    return await service.create_artifact(
        title=body.title,
        content=body.content,
        content_type=body.content_type,
        language=body.language,
        project=body.project,
        source=body.source,
    )


@router.get("", response_model=ArtifactListResponse)
async def list_artifacts(
    project: str | None = Query(default=None, max_length=100),
    content_type: ContentType | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: ArtifactService = Depends(get_artifact_service),
):
    page = await service.list_artifacts(project, content_type, limit, offset)
    return ArtifactListResponse(
        artifacts=page.data,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/{artifact_id}")
async def get_artifact(
    artifact_id: ArtifactId,
    service: ArtifactService = Depends(get_artifact_service),
):
    artifact = await service.get_artifact(artifact_id)
    if artifact is None:
        return not_found("artifact", artifact_id)
    return artifact.model_dump(mode="json")


@router.patch("/{artifact_id}")
async def update_artifact(
    artifact_id: ArtifactId,
    body: UpdateArtifactRequest,
    service: ArtifactService = Depends(get_artifact_service),
):
    artifact = await service.update_artifact(
        artifact_id,
        title=body.title,
        content=body.content,
        content_type=body.content_type,
        language=body.language,
        project=body.project,
    )
    if artifact is None:
        return not_found("artifact", artifact_id)
    return artifact.model_dump(mode="json")


@router.delete("/{artifact_id}")
async def delete_artifact(
    artifact_id: ArtifactId,
    service: ArtifactService = Depends(get_artifact_service),
):
    if not await service.delete_artifact(artifact_id):
        return not_found("artifact", artifact_id)
    return {"deleted": True}
