"""TaskService 测试

覆盖：
1. ID 顺序分配、并发分配唯一且连续、删除后序号不复用
2. 主键冲突自动重试，重试耗尽抛 TaskIdConflictError
3. 激活：同项目至多一个 active、重复激活保留 started_at、终态拒绝激活
4. 排队顺序、删除、完成/取消
5. 镜像失败不影响主流程
"""

import asyncio
from pathlib import Path

import aiosqlite
import pytest
from brain.core.exceptions import (
    ProjectRequiredError,
    TaskIdConflictError,
    TaskStateError,
    TitleRequiredError,
)
from brain.core.mirror import MirrorNotifier
from brain.core.models import Priority, TaskStatus, TrustLevel
from brain.core.store import StoreGroup, create_store_group
from brain.gateway.services.task_service import TaskService


class _RecordingMirror:
    def __init__(self, fail: bool = False) -> None:
        self.synced: list[str] = []
        self.removed: list[str] = []
        self._fail = fail

    def sync(self, entity) -> None:
        if self._fail:
            raise OSError("vault unavailable")
        self.synced.append(entity.id)

    def remove(self, entity) -> None:
        if self._fail:
            raise OSError("vault unavailable")
        self.removed.append(entity.id)


@pytest.fixture
def service(store_group: StoreGroup) -> TaskService:
    return TaskService(store_group)


async def _active_ids(store_group: StoreGroup, project: str) -> list[str]:
    tasks = await store_group.task_store.list_tasks(project, TaskStatus.ACTIVE, 100, 0)
    return [t.id for t in tasks]


class TestTaskCreation:
    async def test_round_trip(self, service: TaskService):
        created = await service.create_task(
            "Write parser",
            "Brain",
            description="tokenize first",
            trust_level=TrustLevel.MATURE,
            priority=Priority.HIGH,
        )
        loaded = await service.get_task(created.id)

        assert loaded == created
        assert loaded.id == "BRAIN-001"
        assert loaded.project == "brain"
        assert loaded.status == TaskStatus.QUEUED
        assert loaded.trust_level == TrustLevel.MATURE
        assert loaded.priority == Priority.HIGH
        assert loaded.started_at is None
        assert loaded.completed_at is None

    async def test_defaults(self, service: TaskService):
        task = await service.create_task("t", "demo")
        assert task.trust_level == TrustLevel.PROTOTYPE
        assert task.priority == Priority.NORMAL

    async def test_sequential_ids(self, service: TaskService):
        ids = [(await service.create_task(f"t{i}", "demo")).id for i in range(5)]
        assert ids == ["DEMO-001", "DEMO-002", "DEMO-003", "DEMO-004", "DEMO-005"]

    async def test_prefixes_are_independent(self, service: TaskService):
        a = await service.create_task("a", "alpha")
        b = await service.create_task("b", "beta")
        assert (a.id, b.id) == ("ALPHA-001", "BETA-001")

    async def test_long_project_prefix_truncated(self, service: TaskService):
        task = await service.create_task("t", "averyverylongproject")
        assert task.id == "AVERYVERYL-001"

    async def test_project_required(self, service: TaskService):
        with pytest.raises(ProjectRequiredError):
            await service.create_task("t", "!!!")

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    async def test_blank_title_rejected(
        self, service: TaskService, store_group: StoreGroup, title: str
    ):
        with pytest.raises(TitleRequiredError):
            await service.create_task(title, "demo")
        assert await store_group.task_store.count_tasks("demo") == 0

        # 被拒绝的请求不占用序号
        task = await service.create_task("real", "demo")
        assert task.id == "DEMO-001"

    async def test_description_sanitized(self, service: TaskService):
        task = await service.create_task("t", "demo", description="ok<script>x()</script>")
        assert task.description == "ok"

    async def test_concurrent_creates_unique_and_contiguous(self, service: TaskService):
        tasks = await asyncio.gather(*(service.create_task(f"t{i}", "demo") for i in range(20)))
        numbers = sorted(int(t.id.split("-")[1]) for t in tasks)
        assert numbers == list(range(1, 21))

    async def test_concurrent_creates_across_connections(
        self, store_group: StoreGroup, gateway_tmp_dir: Path
    ):
        """两个连接共享同一数据库文件时 ID 依然唯一且连续"""
        other_group = await create_store_group(gateway_tmp_dir / "sqlite" / "test.db")
        try:
            first = TaskService(store_group)
            second = TaskService(other_group)
            tasks = await asyncio.gather(
                *(
                    (first if i % 2 else second).create_task(f"t{i}", "demo")
                    for i in range(10)
                )
            )
        finally:
            await other_group.close()

        numbers = sorted(int(t.id.split("-")[1]) for t in tasks)
        assert numbers == list(range(1, 11))

    async def test_number_not_reused_after_delete(self, service: TaskService):
        await service.create_task("a", "demo")
        second = await service.create_task("b", "demo")
        assert await service.delete_task(second.id) is True

        third = await service.create_task("c", "demo")
        assert third.id == "DEMO-003"


class TestTaskIdRetry:
    async def test_retry_after_integrity_error(
        self, service: TaskService, store_group: StoreGroup, monkeypatch
    ):
        original_create = store_group.task_store.create_task
        calls = 0

        async def flaky_create(task):
            nonlocal calls
            calls += 1
            if calls == 1:
                raise aiosqlite.IntegrityError("UNIQUE constraint failed: tasks.id")
            await original_create(task)

        monkeypatch.setattr(store_group.task_store, "create_task", flaky_create)

        task = await service.create_task("t", "demo")
        assert calls == 2
        assert task.id == "DEMO-001"
        assert await service.get_task("DEMO-001") is not None

    async def test_conflict_error_after_retries_exhausted(
        self, service: TaskService, store_group: StoreGroup, monkeypatch
    ):
        calls = 0

        async def always_conflict(task):
            nonlocal calls
            calls += 1
            raise aiosqlite.IntegrityError("UNIQUE constraint failed: tasks.id")

        monkeypatch.setattr(store_group.task_store, "create_task", always_conflict)

        with pytest.raises(TaskIdConflictError):
            await service.create_task("t", "demo")
        assert calls == 3
        assert await store_group.task_store.get_next_task_number("DEMO") == 1


class TestTaskActivation:
    async def test_single_active_per_project(self, service: TaskService, store_group):
        a = await service.create_task("a", "demo")
        b = await service.create_task("b", "demo")
        other = await service.create_task("o", "other")

        await service.activate_task(a.id)
        await service.activate_task(other.id)
        activated = await service.activate_task(b.id)

        assert activated.status == TaskStatus.ACTIVE
        assert await _active_ids(store_group, "demo") == [b.id]
        assert (await service.get_task(a.id)).status == TaskStatus.QUEUED
        assert await _active_ids(store_group, "other") == [other.id]

    async def test_concurrent_activations(self, service: TaskService, store_group):
        tasks = [await service.create_task(f"t{i}", "demo") for i in range(6)]
        await asyncio.gather(*(service.activate_task(t.id) for t in tasks))
        assert len(await _active_ids(store_group, "demo")) == 1

    async def test_repeat_activation_keeps_started_at(self, service: TaskService):
        task = await service.create_task("t", "demo")
        first = await service.activate_task(task.id)
        second = await service.activate_task(task.id)
        assert first.started_at is not None
        assert second.started_at == first.started_at

    async def test_demoted_task_keeps_started_at(self, service: TaskService):
        a = await service.create_task("a", "demo")
        b = await service.create_task("b", "demo")
        first = await service.activate_task(a.id)
        await service.activate_task(b.id)
        again = await service.activate_task(a.id)
        assert again.started_at == first.started_at

    @pytest.mark.parametrize("finish", ["complete_task", "cancel_task"])
    async def test_terminal_task_cannot_activate(self, service: TaskService, finish: str):
        task = await service.create_task("t", "demo")
        finished = await getattr(service, finish)(task.id)

        with pytest.raises(TaskStateError) as exc_info:
            await service.activate_task(task.id)

        assert exc_info.value.task_id == task.id
        assert exc_info.value.status == finished.status.value
        assert await service.get_task(task.id) == finished

    async def test_terminal_activation_does_not_demote(self, service: TaskService):
        active = await service.create_task("a", "demo")
        done = await service.create_task("b", "demo")
        await service.complete_task(done.id)
        await service.activate_task(active.id)

        with pytest.raises(TaskStateError):
            await service.activate_task(done.id)
        assert (await service.get_active_task("demo")).id == active.id

    async def test_activate_missing(self, service: TaskService):
        assert await service.activate_task("DEMO-404") is None


class TestTaskLifecycle:
    async def test_complete_sets_completed_at(self, service: TaskService):
        task = await service.create_task("t", "demo")
        await service.activate_task(task.id)
        done = await service.complete_task(task.id)
        assert done.status == TaskStatus.COMPLETED
        assert done.completed_at is not None

    async def test_complete_and_cancel_are_unconditional(self, service: TaskService):
        task = await service.create_task("t", "demo")
        await service.complete_task(task.id)
        cancelled = await service.cancel_task(task.id)
        assert cancelled.status == TaskStatus.CANCELLED

    async def test_missing_returns_none(self, service: TaskService):
        assert await service.complete_task("DEMO-404") is None
        assert await service.cancel_task("DEMO-404") is None
        assert await service.get_task("DEMO-404") is None

    async def test_delete_twice(self, service: TaskService):
        task = await service.create_task("t", "demo")
        assert await service.delete_task(task.id) is True
        assert await service.delete_task(task.id) is False

    async def test_queue_order(self, service: TaskService):
        a = await service.create_task("A", "demo", priority=Priority.LOW)
        b = await service.create_task("B", "demo", priority=Priority.CRITICAL)
        c = await service.create_task("C", "demo", priority=Priority.NORMAL)

        queue = await service.get_queued_tasks("demo")
        assert [t.id for t in queue] == [b.id, c.id, a.id]

    async def test_get_active_task(self, service: TaskService):
        assert await service.get_active_task("demo") is None
        task = await service.create_task("t", "demo")
        await service.activate_task(task.id)
        assert (await service.get_active_task("Demo")).id == task.id

    async def test_list_tasks_page(self, service: TaskService):
        for i in range(3):
            await service.create_task(f"t{i}", "demo")
        page = await service.list_tasks(project="demo", limit=2)
        assert page.total == 3
        assert len(page.data) == 2


class TestTaskMirror:
    async def test_mirror_receives_changes(self, store_group: StoreGroup):
        mirror = _RecordingMirror()
        service = TaskService(store_group, MirrorNotifier(mirror))

        a = await service.create_task("a", "demo")
        b = await service.create_task("b", "demo")
        await service.activate_task(a.id)
        mirror.synced.clear()
        await service.activate_task(b.id)
        await service.delete_task(b.id)

        assert mirror.synced == [a.id, b.id]
        assert mirror.removed == [b.id]

    async def test_mirror_failure_does_not_propagate(self, store_group: StoreGroup):
        service = TaskService(store_group, MirrorNotifier(_RecordingMirror(fail=True)))

        task = await service.create_task("t", "demo")
        activated = await service.activate_task(task.id)
        assert activated.status == TaskStatus.ACTIVE
        assert await service.delete_task(task.id) is True
