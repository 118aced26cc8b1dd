"""镜像导出端口 -- 把实体同步到人类可读的 markdown Vault

Mirror 协议只有 sync / remove 两个操作。
MirrorNotifier 是业务层唯一使用的入口：任何镜像失败都在这里捕获并记录，
返回值仅供测试或调用方参考，主流程不依赖它。
"""

import json
from pathlib import Path
from typing import Protocol

import structlog

from .models.artifact import Artifact
from .models.enums import ContentType, TaskStatus
from .models.note import Note
from .models.task import Task

log = structlog.get_logger()

Entity = Task | Note | Artifact

# Vault 下的子目录
_ENTITY_DIRS: dict[type, str] = {
    Note: "notes",
    Artifact: "artifacts",
    Task: "tasks",
}

# 任务状态 -> Obsidian 复选框
_TASK_CHECKBOX: dict[TaskStatus, str] = {
    TaskStatus.QUEUED: "[ ]",
    TaskStatus.ACTIVE: "[/]",
    TaskStatus.COMPLETED: "[x]",
    TaskStatus.CANCELLED: "[-]",
}


class Mirror(Protocol):
    """镜像写入接口"""

    def sync(self, entity: Entity) -> None:
        """写入（或覆盖）实体的镜像"""
        ...

    def remove(self, entity: Entity) -> None:
        """删除实体的镜像"""
        ...


class NullMirror:
    """镜像关闭时使用的空实现"""

    def sync(self, entity: Entity) -> None:
        return None

    def remove(self, entity: Entity) -> None:
        return None


class VaultMirror:
    """写入 <vault>/brain/{notes,artifacts,tasks}/<id>.md"""

    def __init__(self, vault_path: Path) -> None:
        self._vault_path = Path(vault_path)
        self._base_path = self._vault_path / "brain"

    @property
    def base_path(self) -> Path:
        return self._base_path

    def sync(self, entity: Entity) -> None:
        path = self.path_for(entity)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_markdown(entity), encoding="utf-8")

    def remove(self, entity: Entity) -> None:
        self.path_for(entity).unlink(missing_ok=True)

    def path_for(self, entity: Entity) -> Path:
        """实体镜像文件路径"""
        return self._base_path / _ENTITY_DIRS[type(entity)] / f"{entity.id}.md"

    def status(self) -> dict:
        """Vault 状态（用于 /ready）"""
        return {
            "enabled": self._vault_path.exists(),
            "path": str(self._base_path),
            "directories": {
                name: (self._base_path / name).exists()
                for name in ("notes", "artifacts", "tasks")
            },
        }


class MirrorNotifier:
    """尽力而为的镜像通知

    sync / remove 永不抛出异常：失败时记录 warning 并返回 False。
    """

    def __init__(self, mirror: Mirror | None = None) -> None:
        self._mirror: Mirror = mirror if mirror is not None else NullMirror()

    @property
    def mirror(self) -> Mirror:
        return self._mirror

    def sync(self, entity: Entity) -> bool:
        try:
            self._mirror.sync(entity)
            return True
        except Exception as e:
            log.warning(
                "mirror_sync_failed",
                entity_type=type(entity).__name__,
                entity_id=entity.id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return False

    def remove(self, entity: Entity) -> bool:
        try:
            self._mirror.remove(entity)
            return True
        except Exception as e:
            log.warning(
                "mirror_remove_failed",
                entity_type=type(entity).__name__,
                entity_id=entity.id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return False


def render_markdown(entity: Entity) -> str:
    """按实体类型渲染 markdown（YAML 风格 front matter + 正文）"""
    if isinstance(entity, Task):
        return _render_task(entity)
    if isinstance(entity, Artifact):
        return _render_artifact(entity)
    return _render_note(entity)


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def _render_note(note: Note) -> str:
    updated = _iso(note.updated_at) or _iso(note.created_at)
    return (
        "---\n"
        f"id: {note.id}\n"
        f"project: {note.project or 'none'}\n"
        f"tags: {json.dumps(list(note.tags))}\n"
        f"source: {note.source}\n"
        f"created: {_iso(note.created_at)}\n"
        f"updated: {updated}\n"
        "---\n"
        "\n"
        f"{note.content}\n"
    )


def _render_artifact(artifact: Artifact) -> str:
    code_language = ""
    if artifact.content_type == ContentType.CODE and artifact.language:
        code_language = artifact.language
    elif artifact.content_type == ContentType.JSON:
        code_language = "json"

    if artifact.content_type == ContentType.MARKDOWN:
        body = artifact.content
    else:
        body = f"```{code_language}\n{artifact.content}\n```"

    escaped_title = artifact.title.replace('"', '\\"')
    updated = _iso(artifact.updated_at) or _iso(artifact.created_at)
    return (
        "---\n"
        f"id: {artifact.id}\n"
        f'title: "{escaped_title}"\n'
        f"content_type: {artifact.content_type.value}\n"
        f"language: {artifact.language or 'none'}\n"
        f"project: {artifact.project or 'none'}\n"
        f"source: {artifact.source}\n"
        f"created: {_iso(artifact.created_at)}\n"
        f"updated: {updated}\n"
        "---\n"
        "\n"
        f"# {artifact.title}\n"
        "\n"
        f"{body}\n"
    )


def _render_task(task: Task) -> str:
    checkbox = _TASK_CHECKBOX[task.status]
    return (
        "---\n"
        f"id: {task.id}\n"
        f"project: {task.project}\n"
        f"status: {task.status.value}\n"
        f"trust_level: {task.trust_level.value}\n"
        f"priority: {task.priority.value}\n"
        f"created: {_iso(task.created_at)}\n"
        f"started: {_iso(task.started_at) or 'null'}\n"
        f"completed: {_iso(task.completed_at) or 'null'}\n"
        "---\n"
        "\n"
        f"# {checkbox} {task.title}\n"
        "\n"
        f"**Project:** [[{task.project}]]\n"
        f"**Status:** {task.status.value}\n"
        f"**Priority:** {task.priority.value}\n"
        f"**Trust Level:** {task.trust_level.value}\n"
        "\n"
        f"{task.description or ''}\n"
    )


def build_mirror(vault_path: Path | None) -> Mirror:
    """根据配置构建镜像实现：未配置 Vault 路径时返回 NullMirror"""
    if vault_path is None:
        return NullMirror()
    return VaultMirror(vault_path)
