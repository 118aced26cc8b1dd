"""ContextStore SQLite 实现

context 表以 project 为唯一键；写入走 INSERT ... ON CONFLICT(project) DO UPDATE，
首次保存时的 id 在后续更新中保持不变。
"""

import json

import aiosqlite

from ..models.context import ProjectContext
from ..timeutil import from_db_time, to_db_time

_COLUMNS = "id, project, summary, tech_stack, conventions, updated_at"

# 出现过项目名的各表
_PROJECT_SOURCES_SQL = """
    SELECT project FROM notes WHERE project IS NOT NULL
    UNION
    SELECT project FROM artifacts WHERE project IS NOT NULL
    UNION
    SELECT project FROM tasks WHERE project IS NOT NULL
    UNION
    SELECT project FROM context
"""


class SqliteContextStore:
    """ContextStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def get_context(self, project: str) -> ProjectContext | None:
        """按（已清洗的）项目名查询上下文"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM context WHERE project = ?",
            (project,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_context(row)

    async def upsert_context(self, context: ProjectContext) -> None:
        """插入或覆盖项目上下文（id 以首次插入为准）"""
        await self._conn.execute(
            f"""
            INSERT INTO context ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(project) DO UPDATE SET
                summary = excluded.summary,
                tech_stack = excluded.tech_stack,
                conventions = excluded.conventions,
                updated_at = excluded.updated_at
            """,
            (
                context.id,
                context.project,
                context.summary,
                json.dumps(context.tech_stack, ensure_ascii=False)
                if context.tech_stack is not None
                else None,
                context.conventions,
                to_db_time(context.updated_at),
            ),
        )

    async def delete_context(self, project: str) -> bool:
        """删除项目上下文，返回是否实际删除了记录"""
        cursor = await self._conn.execute("DELETE FROM context WHERE project = ?", (project,))
        return cursor.rowcount > 0

    async def list_contexts(self) -> list[ProjectContext]:
        """全部上下文，最近更新的在前"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM context ORDER BY updated_at DESC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_context(row) for row in rows]

    async def list_projects(self) -> list[str]:
        """笔记、Artifact、任务、上下文中出现过的全部项目名，字典序"""
        cursor = await self._conn.execute(
            f"SELECT project FROM ({_PROJECT_SOURCES_SQL}) ORDER BY project"
        )
        rows = await cursor.fetchall()
        return [row[0] for row in rows]

    @staticmethod
    def _row_to_context(row: aiosqlite.Row) -> ProjectContext:
        """将数据库行转换为 ProjectContext 模型"""
        return ProjectContext(
            id=row[0],
            project=row[1],
            summary=row[2],
            tech_stack=json.loads(row[3]) if row[3] is not None else None,
            conventions=row[4],
            updated_at=from_db_time(row[5]),
        )
