"""检索结果模型（临时对象，不落库）"""

from pydantic import BaseModel, Field

from .enums import SearchResultType


class SearchResult(BaseModel):
    """单条检索结果"""

    type: SearchResultType = Field(description="实体类型")
    id: str = Field(description="实体 ID")
    snippet: str = Field(description="命中片段")
    score: float = Field(ge=0.0, le=1.0, description="相关度评分 [0, 1]")
    project: str | None = Field(default=None, description="所属项目")
