"""FeedbackService -- 反馈提交与滑动窗口限流

限流只依赖已存储的反馈时间戳，不维护额外计数状态：
窗口内（created_at 严格晚于 now - window）条数 < 上限即允许。
超限时 reset_in = 窗口内最早一条 + window - now（向上取整到秒，不小于 0）。

check_rate_limit 只给出判定，create_feedback 本身不做限制；
调用方必须先检查再写入。submit_feedback 在同一个写事务内完成检查与写入。
"""

import math
from datetime import datetime, timedelta

import structlog
from brain.core.config import (
    FEEDBACK_DAILY_LIMIT,
    FEEDBACK_MESSAGE_MAX_LENGTH,
    FEEDBACK_WINDOW_SECONDS,
)
from brain.core.models import Feedback, Page, RateLimitResult
from brain.core.sanitize import sanitize_content
from brain.core.store import StoreGroup
from brain.core.timeutil import as_utc, utc_now
from ulid import ULID

log = structlog.get_logger()


class FeedbackService:
    """反馈业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        limit: int = FEEDBACK_DAILY_LIMIT,
        window_seconds: int = FEEDBACK_WINDOW_SECONDS,
    ) -> None:
        self._stores = store_group
        self._limit = limit
        self._window = timedelta(seconds=window_seconds)

    async def check_rate_limit(
        self,
        user_id: str,
        now: datetime | None = None,
    ) -> RateLimitResult:
        """计算 user_id 当前是否还能提交反馈"""
        now = as_utc(now) if now else utc_now()
        count, oldest = await self._stores.feedback_store.get_window_stats(
            user_id, now - self._window
        )
        return self._evaluate(count, oldest, now)

    def _evaluate(self, count: int, oldest: datetime | None, now: datetime) -> RateLimitResult:
        if count < self._limit:
            return RateLimitResult(
                allowed=True,
                remaining=self._limit - count,
                limit=self._limit,
            )

        reset_in = 0
        if oldest is not None:
            reset_at = oldest + self._window
            reset_in = max(0, math.ceil((reset_at - now).total_seconds()))
        return RateLimitResult(
            allowed=False,
            remaining=0,
            limit=self._limit,
            reset_in=reset_in,
        )

    def _build_feedback(
        self,
        message: str,
        user_id: str,
        username: str,
        guild_name: str | None,
        created_at: datetime,
    ) -> Feedback:
        return Feedback(
            id=f"fb_{ULID()}",
            message=sanitize_content(message, FEEDBACK_MESSAGE_MAX_LENGTH),
            user_id=user_id,
            username=username,
            guild_name=guild_name,
            created_at=created_at,
        )

    async def create_feedback(
        self,
        message: str,
        user_id: str,
        username: str,
        guild_name: str | None = None,
        created_at: datetime | None = None,
    ) -> Feedback:
        """写入一条反馈（不检查限流）"""
        created_at = as_utc(created_at) if created_at else utc_now()
        feedback = self._build_feedback(message, user_id, username, guild_name, created_at)
        async with self._stores.transaction():
            await self._stores.feedback_store.create_feedback(feedback)
        log.info("feedback_created", feedback_id=feedback.id, user_id=user_id)
        return feedback

    async def submit_feedback(
        self,
        message: str,
        user_id: str,
        username: str,
        guild_name: str | None = None,
    ) -> tuple[Feedback | None, RateLimitResult]:
        """检查限流并在允许时写入

        Returns:
            (新反馈, 写入前的限流结果)；被限流时反馈为 None
        """
        now = utc_now()
        feedback: Feedback | None = None
        async with self._stores.transaction():
            count, oldest = await self._stores.feedback_store.get_window_stats(
                user_id, now - self._window
            )
            rate_limit = self._evaluate(count, oldest, now)
            if rate_limit.allowed:
                feedback = self._build_feedback(message, user_id, username, guild_name, now)
                await self._stores.feedback_store.create_feedback(feedback)

        if feedback is None:
            log.info(
                "feedback_rate_limited",
                user_id=user_id,
                reset_in=rate_limit.reset_in,
            )
        else:
            log.info("feedback_created", feedback_id=feedback.id, user_id=user_id)
        return feedback, rate_limit

    async def get_feedback(self, feedback_id: str) -> Feedback | None:
        """查询单条反馈"""
        return await self._stores.feedback_store.get_feedback(feedback_id)

    async def list_feedback(self, limit: int = 20, offset: int = 0) -> Page[Feedback]:
        """分页查询全部反馈，按 created_at 倒序"""
        items, total = await self._stores.feedback_store.list_feedback(limit, offset)
        return Page[Feedback](data=items, total=total, limit=limit, offset=offset)
