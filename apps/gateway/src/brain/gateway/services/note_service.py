"""NoteService -- 笔记 CRUD + 镜像同步"""

import structlog
from brain.core.config import CONTENT_MAX_LENGTH
from brain.core.mirror import MirrorNotifier
from brain.core.models import Note, Page, TagSet
from brain.core.sanitize import sanitize_content, sanitize_project_name
from brain.core.store import StoreGroup
from brain.core.timeutil import utc_now
from ulid import ULID

log = structlog.get_logger()


class NoteService:
    """笔记业务服务"""

    def __init__(self, store_group: StoreGroup, notifier: MirrorNotifier | None = None) -> None:
        self._stores = store_group
        self._notifier = notifier or MirrorNotifier()

    async def create_note(
        self,
        content: str,
        project: str | None = None,
        tags: list[str] | None = None,
        source: str = "api",
    ) -> Note:
        """创建笔记"""
        note = Note(
            id=f"note_{ULID()}",
            content=sanitize_content(content, CONTENT_MAX_LENGTH),
            project=sanitize_project_name(project) or None,
            tags=TagSet(tags or []),
            source=source,
            created_at=utc_now(),
        )
        async with self._stores.transaction():
            await self._stores.note_store.create_note(note)
        log.info("note_created", note_id=note.id, project=note.project)
        self._notifier.sync(note)
        return note

    async def get_note(self, note_id: str) -> Note | None:
        return await self._stores.note_store.get_note(note_id)

    async def list_notes(
        self,
        project: str | None = None,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Page[Note]:
        """分页查询笔记，按 created_at 倒序"""
        notes, total = await self._stores.note_store.list_notes(
            sanitize_project_name(project) or None, search, limit, offset
        )
        return Page[Note](data=notes, total=total, limit=limit, offset=offset)

    async def update_note(
        self,
        note_id: str,
        content: str | None = None,
        project: str | None = None,
        tags: list[str] | None = None,
    ) -> Note | None:
        """更新笔记；参数为 None 的字段保持不变"""
        async with self._stores.transaction():
            existing = await self._stores.note_store.get_note(note_id)
            if existing is None:
                return None
            updates: dict = {"updated_at": utc_now()}
            if content is not None:
                updates["content"] = sanitize_content(content, CONTENT_MAX_LENGTH)
            if project is not None:
                updates["project"] = sanitize_project_name(project) or None
            if tags is not None:
                updates["tags"] = TagSet(tags)
            note = existing.model_copy(update=updates)
            await self._stores.note_store.update_note(note)

        self._notifier.sync(note)
        return note

    async def delete_note(self, note_id: str) -> bool:
        """删除笔记"""
        async with self._stores.transaction():
            note = await self._stores.note_store.get_note(note_id)
            if note is None:
                return False
            deleted = await self._stores.note_store.delete_note(note_id)

        if deleted:
            log.info("note_deleted", note_id=note_id)
            self._notifier.remove(note)
        return deleted
