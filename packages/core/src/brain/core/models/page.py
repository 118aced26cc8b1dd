"""分页结果模型"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """分页查询结果"""

    data: list[T] = Field(default_factory=list, description="当前页数据")
    total: int = Field(description="满足条件的总条数")
    limit: int = Field(description="每页条数")
    offset: int = Field(description="偏移量")
