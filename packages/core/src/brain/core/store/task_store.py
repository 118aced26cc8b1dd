"""TaskStore SQLite 实现

只提供数据库操作；状态流转规则、ID 分配策略与事务边界由 TaskService 负责。
所有写方法都不自动提交，需在 write_transaction 内调用。
"""

from datetime import datetime

import aiosqlite

from ..models.enums import PRIORITY_RANK, TaskStatus
from ..models.task import Task, parse_task_number
from ..sanitize import escape_like
from ..timeutil import from_db_time, to_db_time

_COLUMNS = (
    "id, title, description, project, status, trust_level, priority, "
    "created_at, started_at, completed_at"
)

# 排队顺序表达式，由 PRIORITY_RANK 生成，未知优先级排在最后
_PRIORITY_ORDER_SQL = (
    "CASE priority "
    + " ".join(f"WHEN '{p.value}' THEN {rank}" for p, rank in PRIORITY_RANK.items())
    + f" ELSE {len(PRIORITY_RANK)} END"
)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """插入任务记录（id 冲突时抛出 aiosqlite.IntegrityError）"""
        await self._conn.execute(
            f"""
            INSERT INTO tasks ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.id,
                task.title,
                task.description,
                task.project,
                task.status.value,
                task.trust_level.value,
                task.priority.value,
                to_db_time(task.created_at),
                to_db_time(task.started_at) if task.started_at else None,
                to_db_time(task.completed_at) if task.completed_at else None,
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(
        self,
        project: str | None = None,
        status: TaskStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Task]:
        """查询任务列表，支持按项目/状态筛选，按 created_at 倒序"""
        where, params = self._build_filter(project, status)
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks{where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
            (*params, limit, offset),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def count_tasks(
        self,
        project: str | None = None,
        status: TaskStatus | None = None,
    ) -> int:
        """统计满足筛选条件的任务数"""
        where, params = self._build_filter(project, status)
        cursor = await self._conn.execute(f"SELECT COUNT(*) FROM tasks{where}", params)
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def get_next_task_number(self, prefix: str) -> int:
        """获取指定前缀的下一个序号

        取现存任务中最大序号与历史分配高水位两者的较大值再 +1。
        只认 "<prefix>-<纯数字>" 形式的 id：项目 demo-x 的 DEMO-X-001
        不会被计入项目 demo 的前缀 DEMO。
        在写事务内调用以确保原子性。
        """
        cursor = await self._conn.execute(
            "SELECT id FROM tasks WHERE id LIKE ? ESCAPE '\\'",
            (f"{escape_like(prefix)}-%",),
        )
        rows = await cursor.fetchall()
        numbers = [parse_task_number(row[0], prefix) for row in rows]
        highest = max((n for n in numbers if n is not None), default=0)

        cursor = await self._conn.execute(
            "SELECT last_number FROM task_sequences WHERE prefix = ?",
            (prefix,),
        )
        row = await cursor.fetchone()
        if row is not None:
            highest = max(highest, row[0])
        return highest + 1

    async def record_task_number(self, prefix: str, number: int) -> None:
        """记录前缀已分配的序号（只增不减）"""
        await self._conn.execute(
            """
            INSERT INTO task_sequences (prefix, last_number) VALUES (?, ?)
            ON CONFLICT(prefix) DO UPDATE
            SET last_number = MAX(last_number, excluded.last_number)
            """,
            (prefix, number),
        )

    async def demote_active_tasks(self, project: str, exclude_id: str) -> list[str]:
        """将项目内除 exclude_id 之外的 active 任务降级为 queued

        Returns:
            被降级的任务 id 列表
        """
        cursor = await self._conn.execute(
            "SELECT id FROM tasks WHERE project = ? AND status = ? AND id != ?",
            (project, TaskStatus.ACTIVE.value, exclude_id),
        )
        demoted = [row[0] for row in await cursor.fetchall()]
        if demoted:
            await self._conn.execute(
                "UPDATE tasks SET status = ? WHERE project = ? AND status = ? AND id != ?",
                (TaskStatus.QUEUED.value, project, TaskStatus.ACTIVE.value, exclude_id),
            )
        return demoted

    async def mark_active(self, task_id: str, started_at: datetime) -> None:
        """置为 active；started_at 仅在为空时写入"""
        await self._conn.execute(
            """
            UPDATE tasks
            SET status = ?, started_at = COALESCE(started_at, ?)
            WHERE id = ?
            """,
            (TaskStatus.ACTIVE.value, to_db_time(started_at), task_id),
        )

    async def mark_completed(self, task_id: str, completed_at: datetime) -> None:
        """置为 completed 并写入完成时间"""
        await self._conn.execute(
            "UPDATE tasks SET status = ?, completed_at = ? WHERE id = ?",
            (TaskStatus.COMPLETED.value, to_db_time(completed_at), task_id),
        )

    async def mark_cancelled(self, task_id: str) -> None:
        """置为 cancelled"""
        await self._conn.execute(
            "UPDATE tasks SET status = ? WHERE id = ?",
            (TaskStatus.CANCELLED.value, task_id),
        )

    async def delete_task(self, task_id: str) -> bool:
        """删除任务，返回是否实际删除了记录"""
        cursor = await self._conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        return cursor.rowcount > 0

    async def get_active_task(self, project: str) -> Task | None:
        """查询项目当前 active 任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE project = ? AND status = ? LIMIT 1",
            (project, TaskStatus.ACTIVE.value),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_queued_tasks(self, project: str, limit: int = 10) -> list[Task]:
        """查询项目排队任务：优先级升序，其次 created_at 升序"""
        cursor = await self._conn.execute(
            f"""
            SELECT {_COLUMNS} FROM tasks
            WHERE project = ? AND status = ?
            ORDER BY {_PRIORITY_ORDER_SQL}, created_at ASC
            LIMIT ?
            """,
            (project, TaskStatus.QUEUED.value, limit),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def search_tasks(
        self,
        query: str,
        project: str | None = None,
        limit: int = 20,
    ) -> list[Task]:
        """标题或描述包含 query（大小写不敏感子串）的任务，按存储顺序"""
        pattern = f"%{escape_like(query)}%"
        sql = (
            f"SELECT {_COLUMNS} FROM tasks "
            "WHERE (title LIKE ? ESCAPE '\\' OR description LIKE ? ESCAPE '\\')"
        )
        params: list[str | int] = [pattern, pattern]
        if project:
            sql += " AND project = ?"
            params.append(project)
        sql += " LIMIT ?"
        params.append(limit)
        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    @staticmethod
    def _build_filter(
        project: str | None,
        status: TaskStatus | None,
    ) -> tuple[str, list[str]]:
        clauses: list[str] = []
        params: list[str] = []
        if project:
            clauses.append("project = ?")
            params.append(project)
        if status:
            clauses.append("status = ?")
            params.append(TaskStatus(status).value)
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            id=row[0],
            title=row[1],
            description=row[2],
            project=row[3],
            status=row[4],
            trust_level=row[5],
            priority=row[6],
            created_at=from_db_time(row[7]),
            started_at=from_db_time(row[8]),
            completed_at=from_db_time(row[9]),
        )
