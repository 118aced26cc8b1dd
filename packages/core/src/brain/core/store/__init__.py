"""Brain Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

import asyncio
from contextlib import AbstractAsyncContextManager
from pathlib import Path

import aiosqlite

from .artifact_store import SqliteArtifactStore
from .context_store import SqliteContextStore
from .feedback_store import SqliteFeedbackStore
from .note_store import SqliteNoteStore
from .protocols import ArtifactStore, ContextStore, FeedbackStore, NoteStore, TaskStore
from .sqlite_init import init_db
from .task_store import SqliteTaskStore
from .transaction import write_transaction


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接和同一把写锁"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.write_lock = asyncio.Lock()
        self.task_store: TaskStore = SqliteTaskStore(conn)
        self.note_store: NoteStore = SqliteNoteStore(conn)
        self.artifact_store: ArtifactStore = SqliteArtifactStore(conn)
        self.context_store: ContextStore = SqliteContextStore(conn)
        self.feedback_store: FeedbackStore = SqliteFeedbackStore(conn)

    def transaction(self) -> AbstractAsyncContextManager[aiosqlite.Connection]:
        """开启单写者事务"""
        return write_transaction(self.conn, self.write_lock)

    async def close(self) -> None:
        """关闭数据库连接"""
        await self.conn.close()


async def create_store_group(db_path: str | Path) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(str(db_path))
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteTaskStore",
    "SqliteNoteStore",
    "SqliteArtifactStore",
    "SqliteContextStore",
    "SqliteFeedbackStore",
    "init_db",
    "write_transaction",
]
