"""Artifact Domain Model -- 代码片段 / 文档 / JSON"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ContentType


class Artifact(BaseModel):
    """Artifact 数据模型"""

    id: str = Field(description="唯一标识，art_<ULID>")
    title: str = Field(description="标题")
    content: str = Field(description="正文")
    content_type: ContentType = Field(description="内容类型")
    language: str | None = Field(default=None, description="代码语言（content_type=code 时）")
    project: str | None = Field(default=None, description="所属项目")
    source: str = Field(default="api", description="来源客户端")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime | None = Field(default=None, description="更新时间")
