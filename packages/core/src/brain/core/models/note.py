"""Note Domain Model"""

from datetime import datetime

from pydantic import BaseModel, Field

from .tags import TagSet


class Note(BaseModel):
    """Note 数据模型 -- 随手记录的短文本"""

    id: str = Field(description="唯一标识，note_<ULID>")
    content: str = Field(description="正文")
    project: str | None = Field(default=None, description="所属项目")
    tags: TagSet = Field(default_factory=TagSet, description="标签")
    source: str = Field(default="api", description="来源客户端")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime | None = Field(default=None, description="更新时间")
