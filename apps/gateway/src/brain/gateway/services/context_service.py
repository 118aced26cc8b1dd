"""ContextService -- 项目上下文读写

项目名先清洗再作为唯一键；清洗后为空的项目名一律视为无效（返回 None / False）。
读取时即使没有保存过上下文，也返回一个空壳（id=None）并附带最近的笔记与 Artifact。
"""

import structlog
from brain.core.config import (
    CONTEXT_NOTE_PREVIEW_LENGTH,
    CONTEXT_RECENT_LIMIT,
    CONTEXT_TEXT_MAX_LENGTH,
    TECH_STACK_ITEM_MAX_LENGTH,
    TECH_STACK_MAX_ITEMS,
)
from brain.core.models import (
    ProjectContext,
    ProjectContextView,
    RecentArtifact,
    RecentNote,
)
from brain.core.sanitize import sanitize_content, sanitize_project_name, truncate
from brain.core.store import StoreGroup
from brain.core.timeutil import utc_now
from ulid import ULID

log = structlog.get_logger()


class ContextService:
    """项目上下文业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def get_context(self, project: str) -> ProjectContextView | None:
        """查询项目上下文，附带最近笔记（正文截断）与最近 Artifact

        Returns:
            项目名清洗后为空时返回 None
        """
        sanitized = sanitize_project_name(project)
        if not sanitized:
            return None

        context = await self._stores.context_store.get_context(sanitized)
        notes, _ = await self._stores.note_store.list_notes(
            sanitized, limit=CONTEXT_RECENT_LIMIT
        )
        artifacts, _ = await self._stores.artifact_store.list_artifacts(
            sanitized, limit=CONTEXT_RECENT_LIMIT
        )

        base = context or ProjectContext(project=sanitized, updated_at=utc_now())
        return ProjectContextView(
            **base.model_dump(),
            recent_notes=[
                RecentNote(
                    id=n.id,
                    content=n.content[:CONTEXT_NOTE_PREVIEW_LENGTH],
                    created_at=n.created_at,
                )
                for n in notes
            ],
            recent_artifacts=[
                RecentArtifact(
                    id=a.id,
                    title=a.title,
                    content_type=a.content_type,
                    created_at=a.created_at,
                )
                for a in artifacts
            ],
        )

    async def update_context(
        self,
        project: str,
        summary: str | None = None,
        tech_stack: list[str] | None = None,
        conventions: str | None = None,
    ) -> ProjectContext | None:
        """创建或更新项目上下文；参数为 None 的字段保持原值

        Returns:
            保存后的上下文，项目名清洗后为空时返回 None
        """
        sanitized = sanitize_project_name(project)
        if not sanitized:
            return None

        async with self._stores.transaction():
            existing = await self._stores.context_store.get_context(sanitized)
            context = existing or ProjectContext(
                id=f"ctx_{ULID()}", project=sanitized, updated_at=utc_now()
            )
            updates: dict = {"updated_at": utc_now()}
            if summary is not None:
                updates["summary"] = sanitize_content(summary, CONTEXT_TEXT_MAX_LENGTH)
            if tech_stack is not None:
                updates["tech_stack"] = [
                    truncate(item, TECH_STACK_ITEM_MAX_LENGTH)
                    for item in tech_stack[:TECH_STACK_MAX_ITEMS]
                ]
            if conventions is not None:
                updates["conventions"] = sanitize_content(conventions, CONTEXT_TEXT_MAX_LENGTH)
            context = context.model_copy(update=updates)
            await self._stores.context_store.upsert_context(context)

        log.info("context_updated", project=sanitized, created=existing is None)
        return context

    async def delete_context(self, project: str) -> bool:
        """删除项目上下文（笔记 / Artifact / 任务不受影响）"""
        sanitized = sanitize_project_name(project)
        if not sanitized:
            return False

        async with self._stores.transaction():
            deleted = await self._stores.context_store.delete_context(sanitized)
        if deleted:
            log.info("context_deleted", project=sanitized)
        return deleted

    async def list_contexts(self) -> list[ProjectContext]:
        """全部项目上下文，最近更新的在前"""
        return await self._stores.context_store.list_contexts()

    async def list_projects(self) -> list[str]:
        """所有出现过的项目名（去重、字典序）"""
        return await self._stores.context_store.list_projects()
