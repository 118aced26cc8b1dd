"""NoteStore SQLite 实现

tags 列存 TagSet 的 JSON 序列化结果；写入前已经过校验，读取时直接反序列化。
"""

import aiosqlite

from ..models.note import Note
from ..models.tags import TagSet
from ..sanitize import escape_like
from ..timeutil import from_db_time, to_db_time

_COLUMNS = "id, content, project, tags, source, created_at, updated_at"


class SqliteNoteStore:
    """NoteStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_note(self, note: Note) -> None:
        """插入笔记记录"""
        await self._conn.execute(
            f"INSERT INTO notes ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                note.id,
                note.content,
                note.project,
                note.tags.model_dump_json(),
                note.source,
                to_db_time(note.created_at),
                to_db_time(note.updated_at) if note.updated_at else None,
            ),
        )

    async def get_note(self, note_id: str) -> Note | None:
        """根据 id 查询笔记"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM notes WHERE id = ?",
            (note_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_note(row)

    async def update_note(self, note: Note) -> None:
        """覆盖写入可变字段"""
        await self._conn.execute(
            """
            UPDATE notes SET content = ?, project = ?, tags = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                note.content,
                note.project,
                note.tags.model_dump_json(),
                to_db_time(note.updated_at) if note.updated_at else None,
                note.id,
            ),
        )

    async def delete_note(self, note_id: str) -> bool:
        """删除笔记，返回是否实际删除了记录"""
        cursor = await self._conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
        return cursor.rowcount > 0

    async def list_notes(
        self,
        project: str | None = None,
        contains: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Note], int]:
        """分页查询笔记，按 created_at 倒序

        Returns:
            (当前页笔记, 总条数)
        """
        clauses: list[str] = []
        params: list[str | int] = []
        if project:
            clauses.append("project = ?")
            params.append(project)
        if contains:
            clauses.append("content LIKE ? ESCAPE '\\'")
            params.append(f"%{escape_like(contains)}%")
        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""

        cursor = await self._conn.execute(f"SELECT COUNT(*) FROM notes{where}", params)
        total_row = await cursor.fetchone()

        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM notes{where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
            (*params, limit, offset),
        )
        rows = await cursor.fetchall()
        return [self._row_to_note(row) for row in rows], (total_row[0] if total_row else 0)

    async def search_notes(
        self,
        query: str,
        project: str | None = None,
        limit: int = 20,
    ) -> list[Note]:
        """正文包含 query（大小写不敏感子串）的笔记，按存储顺序"""
        sql = f"SELECT {_COLUMNS} FROM notes WHERE content LIKE ? ESCAPE '\\'"
        params: list[str | int] = [f"%{escape_like(query)}%"]
        if project:
            sql += " AND project = ?"
            params.append(project)
        sql += " LIMIT ?"
        params.append(limit)
        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_note(row) for row in rows]

    async def list_tag_sets_matching(self, partial: str, limit: int = 5) -> list[TagSet]:
        """查询含有以 partial 开头标签的笔记标签集合（去重）"""
        cursor = await self._conn.execute(
            "SELECT DISTINCT tags FROM notes WHERE tags LIKE ? ESCAPE '\\' LIMIT ?",
            (f'%"{escape_like(partial)}%', limit),
        )
        rows = await cursor.fetchall()
        return [TagSet.model_validate_json(row[0]) for row in rows]

    @staticmethod
    def _row_to_note(row: aiosqlite.Row) -> Note:
        """将数据库行转换为 Note 模型"""
        return Note(
            id=row[0],
            content=row[1],
            project=row[2],
            tags=TagSet.model_validate_json(row[3]),
            source=row[4],
            created_at=from_db_time(row[5]),
            updated_at=from_db_time(row[6]),
        )
