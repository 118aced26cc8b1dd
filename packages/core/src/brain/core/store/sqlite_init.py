"""SQLite 数据库初始化

PRAGMA 配置 + 表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# notes 表 DDL
_NOTES_DDL = """
CREATE TABLE IF NOT EXISTS notes (
    id          TEXT PRIMARY KEY,
    content     TEXT NOT NULL,
    project     TEXT,
    tags        TEXT NOT NULL DEFAULT '[]',
    source      TEXT NOT NULL DEFAULT 'api',
    created_at  TEXT NOT NULL,
    updated_at  TEXT
);
"""

_NOTES_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_notes_project ON notes(project);",
    "CREATE INDEX IF NOT EXISTS idx_notes_created_at ON notes(created_at DESC);",
]

# artifacts 表 DDL
_ARTIFACTS_DDL = """
CREATE TABLE IF NOT EXISTS artifacts (
    id            TEXT PRIMARY KEY,
    title         TEXT NOT NULL,
    content       TEXT NOT NULL,
    content_type  TEXT NOT NULL,
    language      TEXT,
    project       TEXT,
    source        TEXT NOT NULL DEFAULT 'api',
    created_at    TEXT NOT NULL,
    updated_at    TEXT
);
"""

_ARTIFACTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_artifacts_project ON artifacts(project);",
    "CREATE INDEX IF NOT EXISTS idx_artifacts_title ON artifacts(title);",
]

# context 表 DDL（每个项目一条，tech_stack 存 JSON 数组）
_CONTEXT_DDL = """
CREATE TABLE IF NOT EXISTS context (
    id           TEXT PRIMARY KEY,
    project      TEXT NOT NULL UNIQUE,
    summary      TEXT,
    tech_stack   TEXT,
    conventions  TEXT,
    updated_at   TEXT NOT NULL
);
"""

_CONTEXT_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_context_updated_at ON context(updated_at DESC);",
]

# tasks 表 DDL（id 主键即 ID 唯一约束）
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id            TEXT PRIMARY KEY,
    title         TEXT NOT NULL,
    description   TEXT,
    project       TEXT NOT NULL,
    status        TEXT NOT NULL DEFAULT 'queued',
    trust_level   TEXT NOT NULL DEFAULT 'PROTOTYPE',
    priority      TEXT NOT NULL DEFAULT 'NORMAL',
    created_at    TEXT NOT NULL,
    started_at    TEXT,
    completed_at  TEXT
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_project_status ON tasks(project, status);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);",
]

# 每个前缀已分配过的最大序号，删除任务后序号也不回收
_TASK_SEQUENCES_DDL = """
CREATE TABLE IF NOT EXISTS task_sequences (
    prefix       TEXT PRIMARY KEY,
    last_number  INTEGER NOT NULL
);
"""

# feedback 表 DDL
_FEEDBACK_DDL = """
CREATE TABLE IF NOT EXISTS feedback (
    id          TEXT PRIMARY KEY,
    message     TEXT NOT NULL,
    user_id     TEXT NOT NULL,
    username    TEXT NOT NULL,
    guild_name  TEXT,
    created_at  TEXT NOT NULL
);
"""

_FEEDBACK_INDEXES = [
    # 限流查询：按用户 + 时间窗口
    "CREATE INDEX IF NOT EXISTS idx_feedback_user_created ON feedback(user_id, created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_feedback_created_at ON feedback(created_at DESC);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    for ddl in (
        _NOTES_DDL,
        _ARTIFACTS_DDL,
        _CONTEXT_DDL,
        _TASKS_DDL,
        _TASK_SEQUENCES_DDL,
        _FEEDBACK_DDL,
    ):
        await conn.execute(ddl)

    # 创建索引
    for idx_sql in (
        _NOTES_INDEXES
        + _ARTIFACTS_INDEXES
        + _CONTEXT_INDEXES
        + _TASKS_INDEXES
        + _FEEDBACK_INDEXES
    ):
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
