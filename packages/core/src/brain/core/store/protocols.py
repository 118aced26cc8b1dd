"""Store Protocol 接口定义

定义 TaskStore、NoteStore、ArtifactStore、ContextStore、FeedbackStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
写方法都不自动提交，由调用方在 write_transaction 内调用。
"""

from datetime import datetime
from typing import Protocol

from ..models.artifact import Artifact
from ..models.context import ProjectContext
from ..models.enums import TaskStatus
from ..models.feedback import Feedback
from ..models.note import Note
from ..models.tags import TagSet
from ..models.task import Task


class TaskStore(Protocol):
    """Task 存储接口"""

    async def create_task(self, task: Task) -> None:
        """插入任务记录（id 冲突时抛出 IntegrityError）"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        ...

    async def list_tasks(
        self,
        project: str | None = None,
        status: TaskStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Task]:
        """查询任务列表"""
        ...

    async def count_tasks(
        self,
        project: str | None = None,
        status: TaskStatus | None = None,
    ) -> int:
        """统计任务数"""
        ...

    async def get_next_task_number(self, prefix: str) -> int:
        """获取前缀的下一个序号（MAX+1，含历史高水位）"""
        ...

    async def record_task_number(self, prefix: str, number: int) -> None:
        """记录前缀已分配的序号"""
        ...

    async def demote_active_tasks(self, project: str, exclude_id: str) -> list[str]:
        """降级项目内其他 active 任务，返回被降级的 id"""
        ...

    async def mark_active(self, task_id: str, started_at: datetime) -> None:
        """置为 active（started_at 只写一次）"""
        ...

    async def mark_completed(self, task_id: str, completed_at: datetime) -> None:
        """置为 completed"""
        ...

    async def mark_cancelled(self, task_id: str) -> None:
        """置为 cancelled"""
        ...

    async def delete_task(self, task_id: str) -> bool:
        """删除任务"""
        ...

    async def get_active_task(self, project: str) -> Task | None:
        """查询项目当前 active 任务"""
        ...

    async def list_queued_tasks(self, project: str, limit: int = 10) -> list[Task]:
        """按优先级排序的排队任务"""
        ...

    async def search_tasks(
        self,
        query: str,
        project: str | None = None,
        limit: int = 20,
    ) -> list[Task]:
        """子串检索任务"""
        ...


class NoteStore(Protocol):
    """Note 存储接口"""

    async def create_note(self, note: Note) -> None: ...

    async def get_note(self, note_id: str) -> Note | None: ...

    async def update_note(self, note: Note) -> None: ...

    async def delete_note(self, note_id: str) -> bool: ...

    async def list_notes(
        self,
        project: str | None = None,
        contains: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Note], int]: ...

    async def search_notes(
        self,
        query: str,
        project: str | None = None,
        limit: int = 20,
    ) -> list[Note]: ...

    async def list_tag_sets_matching(self, partial: str, limit: int = 5) -> list[TagSet]: ...


class ArtifactStore(Protocol):
    """Artifact 存储接口"""

    async def create_artifact(self, artifact: Artifact) -> None: ...

    async def get_artifact(self, artifact_id: str) -> Artifact | None: ...

    async def update_artifact(self, artifact: Artifact) -> None: ...

    async def delete_artifact(self, artifact_id: str) -> bool: ...

    async def list_artifacts(
        self,
        project: str | None = None,
        content_type: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Artifact], int]: ...

    async def search_artifacts(
        self,
        query: str,
        project: str | None = None,
        limit: int = 20,
    ) -> list[Artifact]: ...

    async def list_titles_with_prefix(self, prefix: str, limit: int = 5) -> list[str]: ...


class ContextStore(Protocol):
    """项目上下文存储接口（project 为唯一键）"""

    async def get_context(self, project: str) -> ProjectContext | None: ...

    async def upsert_context(self, context: ProjectContext) -> None: ...

    async def delete_context(self, project: str) -> bool: ...

    async def list_contexts(self) -> list[ProjectContext]: ...

    async def list_projects(self) -> list[str]: ...


class FeedbackStore(Protocol):
    """Feedback 存储接口

    反馈表 append-only：只允许插入，不允许更新或删除。
    """

    async def create_feedback(self, feedback: Feedback) -> None:
        """追加反馈"""
        ...

    async def get_feedback(self, feedback_id: str) -> Feedback | None:
        """根据 id 查询反馈"""
        ...

    async def list_feedback(
        self,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Feedback], int]:
        """分页查询反馈"""
        ...

    async def get_window_stats(
        self,
        user_id: str,
        since: datetime,
    ) -> tuple[int, datetime | None]:
        """窗口内提交条数与最早提交时间"""
        ...
