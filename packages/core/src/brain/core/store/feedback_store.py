"""FeedbackStore SQLite 实现

反馈表 append-only：只允许插入和查询。
"""

from datetime import datetime

import aiosqlite

from ..models.feedback import Feedback
from ..timeutil import from_db_time, to_db_time

_COLUMNS = "id, message, user_id, username, guild_name, created_at"


class SqliteFeedbackStore:
    """FeedbackStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_feedback(self, feedback: Feedback) -> None:
        """追加反馈记录"""
        await self._conn.execute(
            f"INSERT INTO feedback ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            (
                feedback.id,
                feedback.message,
                feedback.user_id,
                feedback.username,
                feedback.guild_name,
                to_db_time(feedback.created_at),
            ),
        )

    async def get_feedback(self, feedback_id: str) -> Feedback | None:
        """根据 id 查询反馈"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM feedback WHERE id = ?",
            (feedback_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_feedback(row)

    async def list_feedback(self, limit: int = 20, offset: int = 0) -> tuple[list[Feedback], int]:
        """分页查询所有反馈，按 created_at 倒序

        Returns:
            (当前页反馈, 总条数)
        """
        cursor = await self._conn.execute("SELECT COUNT(*) FROM feedback")
        total_row = await cursor.fetchone()
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM feedback ORDER BY created_at DESC LIMIT ? OFFSET ?",
            (limit, offset),
        )
        rows = await cursor.fetchall()
        return (
            [self._row_to_feedback(row) for row in rows],
            total_row[0] if total_row else 0,
        )

    async def get_window_stats(
        self,
        user_id: str,
        since: datetime,
    ) -> tuple[int, datetime | None]:
        """统计 user_id 在 since 之后（严格大于）提交的反馈

        Returns:
            (条数, 窗口内最早一条的时间)
        """
        cursor = await self._conn.execute(
            """
            SELECT COUNT(*), MIN(created_at)
            FROM feedback
            WHERE user_id = ? AND created_at > ?
            """,
            (user_id, to_db_time(since)),
        )
        row = await cursor.fetchone()
        if row is None:
            return 0, None
        return row[0], from_db_time(row[1])

    @staticmethod
    def _row_to_feedback(row: aiosqlite.Row) -> Feedback:
        """将数据库行转换为 Feedback 模型"""
        return Feedback(
            id=row[0],
            message=row[1],
            user_id=row[2],
            username=row[3],
            guild_name=row[4],
            created_at=from_db_time(row[5]),
        )
