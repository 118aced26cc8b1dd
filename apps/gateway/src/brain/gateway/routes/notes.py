"""笔记路由"""

from typing import Annotated

from brain.core.config import CONTENT_MAX_LENGTH
from brain.core.models import Note
from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from ..deps import get_note_service
from ..services.note_service import NoteService
from ._errors import not_found

router = APIRouter(prefix="/api/v1/notes")

NoteId = Annotated[str, Path(max_length=100)]


class CreateNoteRequest(BaseModel):
    """创建笔记请求体"""

    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)
    project: str | None = Field(default=None, max_length=100)
    tags: list[str] = Field(default_factory=list)
    source: str = Field(default="api", max_length=50)


class UpdateNoteRequest(BaseModel):
    """更新笔记请求体，未提供的字段保持不变"""

    content: str | None = Field(default=None, min_length=1, max_length=CONTENT_MAX_LENGTH)
    project: str | None = Field(default=None, max_length=100)
    tags: list[str] | None = None


class NoteListResponse(BaseModel):
    notes: list[Note]
    total: int
    limit: int
    offset: int


@router.post("", status_code=201, response_model=Note)
async def create_note(
    body: CreateNoteRequest,
    service: NoteService = Depends(get_note_service),
):
    return await service.create_note(
        content=body.content,
        project=body.project,
        tags=body.tags,
        source=body.source,
    )


@router.get("", response_model=NoteListResponse)
async def list_notes(
    project: str | None = Query(default=None, max_length=100),
    search: str | None = Query(default=None, max_length=200),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: NoteService = Depends(get_note_service),
):
    """笔记列表，search 为正文子串过滤"""
    page = await service.list_notes(project, search, limit, offset)
    return NoteListResponse(
        notes=page.data,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/{note_id}")
async def get_note(
    note_id: NoteId,
    service: NoteService = Depends(get_note_service),
):
    note = await service.get_note(note_id)
    if note is None:
        return not_found("note", note_id)
    return note.model_dump(mode="json")


@router.patch("/{note_id}")
async def update_note(
    note_id: NoteId,
    body: UpdateNoteRequest,
    service: NoteService = Depends(get_note_service),
):
    note = await service.update_note(
        note_id,
        content=body.content,
        project=body.project,
        tags=body.tags,
    )
    if note is None:
        return not_found("note", note_id)
    return note.model_dump(mode="json")


@router.delete("/{note_id}")
async def delete_note(
    note_id: NoteId,
    service: NoteService = Depends(get_note_service),
):
    if not await service.delete_note(note_id):
        return not_found("note", note_id)
    return {"deleted": True}
