"""Feedback Domain Model

反馈表 append-only：核心层不提供更新或删除。
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Feedback(BaseModel):
    """用户反馈"""

    id: str = Field(description="唯一标识，fb_<ULID>")
    message: str = Field(description="反馈内容")
    user_id: str = Field(description="提交者 ID（限流维度）")
    username: str = Field(description="提交者名称")
    guild_name: str | None = Field(default=None, description="来源社区/服务器名称")
    created_at: datetime = Field(description="提交时间")


class RateLimitResult(BaseModel):
    """限流判定结果 -- 数据结果而非异常，由调用方决定如何处理"""

    allowed: bool = Field(description="是否允许提交")
    remaining: int = Field(description="窗口内剩余次数")
    limit: int = Field(description="窗口内上限")
    reset_in: int | None = Field(
        default=None,
        description="距离最早一条记录滑出窗口的秒数（仅 allowed=False 时）",
    )
