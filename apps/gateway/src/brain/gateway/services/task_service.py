"""TaskService -- 任务生命周期与 ID 分配

唯一允许写入 status / started_at / completed_at 的组件。

ID 分配：前缀 = 项目名大写截断 10 位，序号 = 前缀内最大序号 + 1。
分配与插入在同一个单写者事务内完成；若插入仍遇到主键冲突
（例如另一进程抢先写入），回滚后重新分配，最多重试 TASK_ID_MAX_RETRIES 次。

激活：同一事务内先把同项目其他 active 任务降级为 queued，再激活目标任务，
保证任意时刻每个项目最多一个 active 任务。

镜像写入在事务提交之后进行，失败只记录日志。
"""

import aiosqlite
import structlog
from brain.core.config import (
    TASK_DESCRIPTION_MAX_LENGTH,
    TASK_ID_MAX_RETRIES,
    TASK_TITLE_MAX_LENGTH,
)
from brain.core.exceptions import (
    ProjectRequiredError,
    TaskIdConflictError,
    TaskStateError,
    TitleRequiredError,
)
from brain.core.mirror import MirrorNotifier
from brain.core.models import (
    Page,
    Priority,
    Task,
    TaskStatus,
    TrustLevel,
    format_task_id,
    task_id_prefix,
    validate_transition,
)
from brain.core.sanitize import sanitize_content, sanitize_project_name, truncate
from brain.core.store import StoreGroup
from brain.core.timeutil import utc_now

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    _max_task_id_retries = TASK_ID_MAX_RETRIES

    def __init__(self, store_group: StoreGroup, notifier: MirrorNotifier | None = None) -> None:
        self._stores = store_group
        self._notifier = notifier or MirrorNotifier()

    async def create_task(
        self,
        title: str,
        project: str,
        description: str | None = None,
        trust_level: TrustLevel | None = None,
        priority: Priority | None = None,
    ) -> Task:
        """创建任务（初始状态 queued）

        Raises:
            ProjectRequiredError: 项目名清洗后为空
            TitleRequiredError: 标题为空或只含空白
            TaskIdConflictError: 多次重试后 ID 仍冲突
        """
        sanitized_project = sanitize_project_name(project)
        if not sanitized_project:
            raise ProjectRequiredError(project)
        if not title or not title.strip():
            raise TitleRequiredError()

        prefix = task_id_prefix(sanitized_project)
        clean_title = truncate(title, TASK_TITLE_MAX_LENGTH)
        clean_description = (
            sanitize_content(description, TASK_DESCRIPTION_MAX_LENGTH) if description else None
        )

        for attempt in range(1, self._max_task_id_retries + 1):
            try:
                async with self._stores.transaction():
                    number = await self._stores.task_store.get_next_task_number(prefix)
                    task = Task(
                        id=format_task_id(prefix, number),
                        title=clean_title,
                        description=clean_description,
                        project=sanitized_project,
                        status=TaskStatus.QUEUED,
                        trust_level=trust_level or TrustLevel.PROTOTYPE,
                        priority=priority or Priority.NORMAL,
                        created_at=utc_now(),
                    )
                    await self._stores.task_store.create_task(task)
                    await self._stores.task_store.record_task_number(prefix, number)
                break
            except aiosqlite.IntegrityError:
                if attempt < self._max_task_id_retries:
                    log.warning(
                        "task_id_conflict_retry",
                        prefix=prefix,
                        attempt=attempt,
                    )
                    continue
                raise TaskIdConflictError(prefix, attempt) from None

        log.info("task_created", task_id=task.id, project=sanitized_project)
        self._notifier.sync(task)
        return task

    async def get_task(self, task_id: str) -> Task | None:
        """查询任务详情"""
        return await self._stores.task_store.get_task(task_id)

    async def list_tasks(
        self,
        project: str | None = None,
        status: TaskStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Page[Task]:
        """分页查询任务，按 created_at 倒序"""
        project = sanitize_project_name(project) if project else None
        tasks = await self._stores.task_store.list_tasks(project, status, limit, offset)
        total = await self._stores.task_store.count_tasks(project, status)
        return Page[Task](data=tasks, total=total, limit=limit, offset=offset)

    async def activate_task(self, task_id: str) -> Task | None:
        """激活任务

        Returns:
            激活后的 Task，任务不存在时返回 None

        Raises:
            TaskStateError: 任务已在终态（completed / cancelled），不做任何修改
        """
        demoted_ids: list[str] = []
        async with self._stores.transaction():
            task = await self._stores.task_store.get_task(task_id)
            if task is None:
                return None
            if not validate_transition(task.status, TaskStatus.ACTIVE):
                raise TaskStateError(task_id, task.status.value)

            demoted_ids = await self._stores.task_store.demote_active_tasks(
                task.project, exclude_id=task_id
            )
            await self._stores.task_store.mark_active(task_id, utc_now())

        for demoted_id in demoted_ids:
            log.info("task_demoted", task_id=demoted_id, project=task.project)
            demoted = await self._stores.task_store.get_task(demoted_id)
            if demoted is not None:
                self._notifier.sync(demoted)

        updated = await self._stores.task_store.get_task(task_id)
        if updated is not None:
            log.info("task_activated", task_id=task_id, project=updated.project)
            self._notifier.sync(updated)
        return updated

    async def complete_task(self, task_id: str) -> Task | None:
        """完成任务（不校验当前状态，终态任务也会被重新标记并刷新 completed_at）"""
        async with self._stores.transaction():
            task = await self._stores.task_store.get_task(task_id)
            if task is None:
                return None
            await self._stores.task_store.mark_completed(task_id, utc_now())

        updated = await self._stores.task_store.get_task(task_id)
        if updated is not None:
            log.info("task_completed", task_id=task_id, from_status=task.status.value)
            self._notifier.sync(updated)
        return updated

    async def cancel_task(self, task_id: str) -> Task | None:
        """取消任务（不校验当前状态，completed 任务也可被取消）"""
        async with self._stores.transaction():
            task = await self._stores.task_store.get_task(task_id)
            if task is None:
                return None
            await self._stores.task_store.mark_cancelled(task_id)

        updated = await self._stores.task_store.get_task(task_id)
        if updated is not None:
            log.info("task_cancelled", task_id=task_id, from_status=task.status.value)
            self._notifier.sync(updated)
        return updated

    async def delete_task(self, task_id: str) -> bool:
        """删除任务，返回是否删除成功；已删除的序号不会被再次分配"""
        async with self._stores.transaction():
            task = await self._stores.task_store.get_task(task_id)
            if task is None:
                return False
            deleted = await self._stores.task_store.delete_task(task_id)

        if deleted:
            log.info("task_deleted", task_id=task_id)
            self._notifier.remove(task)
        return deleted

    async def get_active_task(self, project: str) -> Task | None:
        """查询项目当前 active 任务（至多一个）"""
        return await self._stores.task_store.get_active_task(sanitize_project_name(project))

    async def get_queued_tasks(self, project: str, limit: int = 10) -> list[Task]:
        """查询项目排队任务：CRITICAL > HIGH > NORMAL > LOW，同级先创建先出"""
        return await self._stores.task_store.list_queued_tasks(
            sanitize_project_name(project), limit
        )
