"""ArtifactService -- Artifact CRUD + 镜像同步"""

import structlog
from brain.core.config import CONTENT_MAX_LENGTH
from brain.core.mirror import MirrorNotifier
from brain.core.models import Artifact, ContentType, Page
from brain.core.sanitize import sanitize_content, sanitize_project_name
from brain.core.store import StoreGroup
from brain.core.timeutil import utc_now
from ulid import ULID

log = structlog.get_logger()


class ArtifactService:
    """Artifact 业务服务"""

    def __init__(self, store_group: StoreGroup, notifier: MirrorNotifier | None = None) -> None:
        self._stores = store_group
        self._notifier = notifier or MirrorNotifier()

    async def create_artifact(
        self,
        title: str,
        content: str,
        content_type: ContentType,
        language: str | None = None,
        project: str | None = None,
        source: str = "api",
    ) -> Artifact:
        """创建 Artifact"""
        artifact = Artifact(
            id=f"art_{ULID()}",
            title=title,
            content=sanitize_content(content, CONTENT_MAX_LENGTH),
            content_type=content_type,
            language=language,
            project=sanitize_project_name(project) or None,
            source=source,
            created_at=utc_now(),
        )
        async with self._stores.transaction():
            await self._stores.artifact_store.create_artifact(artifact)
        log.info("artifact_created", artifact_id=artifact.id, project=artifact.project)
        self._notifier.sync(artifact)
        return artifact

    async def get_artifact(self, artifact_id: str) -> Artifact | None:
        return await self._stores.artifact_store.get_artifact(artifact_id)

    async def list_artifacts(
        self,
        project: str | None = None,
        content_type: ContentType | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Page[Artifact]:
        """分页查询 Artifact，按 created_at 倒序"""
        artifacts, total = await self._stores.artifact_store.list_artifacts(
            sanitize_project_name(project) or None,
            content_type.value if content_type else None,
            limit,
            offset,
        )
        return Page[Artifact](data=artifacts, total=total, limit=limit, offset=offset)

    async def update_artifact(
        self,
        artifact_id: str,
        title: str | None = None,
        content: str | None = None,
        content_type: ContentType | None = None,
        language: str | None = None,
        project: str | None = None,
    ) -> Artifact | None:
        """更新 Artifact；参数为 None 的字段保持不变"""
        async with self._stores.transaction():
            existing = await self._stores.artifact_store.get_artifact(artifact_id)
            if existing is None:
                return None
            updates: dict = {"updated_at": utc_now()}
            if title is not None:
                updates["title"] = title
            if content is not None:
                updates["content"] = sanitize_content(content, CONTENT_MAX_LENGTH)
            if content_type is not None:
                updates["content_type"] = content_type
            if language is not None:
                updates["language"] = language
            if project is not None:
                updates["project"] = sanitize_project_name(project) or None
            artifact = existing.model_copy(update=updates)
            await self._stores.artifact_store.update_artifact(artifact)

        self._notifier.sync(artifact)
        return artifact

    async def delete_artifact(self, artifact_id: str) -> bool:
        """删除 Artifact"""
        async with self._stores.transaction():
            artifact = await self._stores.artifact_store.get_artifact(artifact_id)
            if artifact is None:
                return False
            deleted = await self._stores.artifact_store.delete_artifact(artifact_id)

        if deleted:
            log.info("artifact_deleted", artifact_id=artifact_id)
            self._notifier.remove(artifact)
        return deleted
