"""ArtifactStore SQLite 实现"""

import aiosqlite

from ..models.artifact import Artifact
from ..sanitize import escape_like
from ..timeutil import from_db_time, to_db_time

_COLUMNS = (
    "id, title, content, content_type, language, project, source, created_at, updated_at"
)


class SqliteArtifactStore:
    """ArtifactStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_artifact(self, artifact: Artifact) -> None:
        """插入 Artifact 记录"""
        await self._conn.execute(
            f"INSERT INTO artifacts ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                artifact.id,
                artifact.title,
                artifact.content,
                artifact.content_type.value,
                artifact.language,
                artifact.project,
                artifact.source,
                to_db_time(artifact.created_at),
                to_db_time(artifact.updated_at) if artifact.updated_at else None,
            ),
        )

    async def get_artifact(self, artifact_id: str) -> Artifact | None:
        """根据 id 查询 Artifact"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM artifacts WHERE id = ?",
            (artifact_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_artifact(row)

    async def update_artifact(self, artifact: Artifact) -> None:
        """覆盖写入可变字段"""
        await self._conn.execute(
            """
            UPDATE artifacts
            SET title = ?, content = ?, content_type = ?, language = ?, project = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                artifact.title,
                artifact.content,
                artifact.content_type.value,
                artifact.language,
                artifact.project,
                to_db_time(artifact.updated_at) if artifact.updated_at else None,
                artifact.id,
            ),
        )

    async def delete_artifact(self, artifact_id: str) -> bool:
        """删除 Artifact，返回是否实际删除了记录"""
        cursor = await self._conn.execute(
            "DELETE FROM artifacts WHERE id = ?",
            (artifact_id,),
        )
        return cursor.rowcount > 0

    async def list_artifacts(
        self,
        project: str | None = None,
        content_type: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Artifact], int]:
        """分页查询 Artifact，按 created_at 倒序

        Returns:
            (当前页 Artifact, 总条数)
        """
        clauses: list[str] = []
        params: list[str | int] = []
        if project:
            clauses.append("project = ?")
            params.append(project)
        if content_type:
            clauses.append("content_type = ?")
            params.append(content_type)
        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""

        cursor = await self._conn.execute(f"SELECT COUNT(*) FROM artifacts{where}", params)
        total_row = await cursor.fetchone()

        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM artifacts{where} "
            "ORDER BY created_at DESC LIMIT ? OFFSET ?",
            (*params, limit, offset),
        )
        rows = await cursor.fetchall()
        return (
            [self._row_to_artifact(row) for row in rows],
            total_row[0] if total_row else 0,
        )

    async def search_artifacts(
        self,
        query: str,
        project: str | None = None,
        limit: int = 20,
    ) -> list[Artifact]:
        """标题或正文包含 query（大小写不敏感子串）的 Artifact，按存储顺序"""
        pattern = f"%{escape_like(query)}%"
        sql = (
            f"SELECT {_COLUMNS} FROM artifacts "
            "WHERE (title LIKE ? ESCAPE '\\' OR content LIKE ? ESCAPE '\\')"
        )
        params: list[str | int] = [pattern, pattern]
        if project:
            sql += " AND project = ?"
            params.append(project)
        sql += " LIMIT ?"
        params.append(limit)
        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_artifact(row) for row in rows]

    async def list_titles_with_prefix(self, prefix: str, limit: int = 5) -> list[str]:
        """标题以 prefix 开头（大小写敏感）的去重标题"""
        cursor = await self._conn.execute(
            "SELECT DISTINCT title FROM artifacts WHERE substr(title, 1, ?) = ? LIMIT ?",
            (len(prefix), prefix, limit),
        )
        rows = await cursor.fetchall()
        return [row[0] for row in rows]

    @staticmethod
    def _row_to_artifact(row: aiosqlite.Row) -> Artifact:
        """将数据库行转换为 Artifact 模型"""
        return Artifact(
            id=row[0],
            title=row[1],
            content=row[2],
            content_type=row[3],
            language=row[4],
            project=row[5],
            source=row[6],
            created_at=from_db_time(row[7]),
            updated_at=from_db_time(row[8]),
        )
