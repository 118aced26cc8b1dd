"""ProjectContext Domain Model

每个项目一条上下文记录（summary / tech_stack / conventions），按清洗后的项目名唯一。
读取时附带该项目最近的笔记与 Artifact 摘要，供 bot 在回答前加载项目背景。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ContentType


class ProjectContext(BaseModel):
    """项目上下文记录"""

    id: str | None = Field(default=None, description="ctx_<ULID>；尚未保存过时为 None")
    project: str = Field(description="清洗后的项目名（唯一）")
    summary: str | None = Field(default=None, description="项目概述")
    tech_stack: list[str] | None = Field(default=None, description="技术栈条目")
    conventions: str | None = Field(default=None, description="约定与规范")
    updated_at: datetime = Field(description="最近更新时间")


class RecentNote(BaseModel):
    id: str
    content: str = Field(description="正文前 200 字符")
    created_at: datetime


class RecentArtifact(BaseModel):
    id: str
    title: str
    content_type: ContentType
    created_at: datetime


class ProjectContextView(ProjectContext):
    """GET /api/v1/context/{project} 的响应体"""

    recent_notes: list[RecentNote] = Field(default_factory=list)
    recent_artifacts: list[RecentArtifact] = Field(default_factory=list)
