"""Brain Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .artifact import Artifact
from .context import ProjectContext, ProjectContextView, RecentArtifact, RecentNote
from .enums import (
    PRIORITY_RANK,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ContentType,
    Priority,
    SearchEntityType,
    SearchResultType,
    TaskStatus,
    TrustLevel,
    validate_transition,
)
from .feedback import Feedback, RateLimitResult
from .note import Note
from .page import Page
from .search import SearchResult
from .tags import TagSet
from .task import Task, format_task_id, parse_task_number, task_id_prefix

__all__ = [
    # 枚举
    "TaskStatus",
    "TrustLevel",
    "Priority",
    "ContentType",
    "SearchEntityType",
    "SearchResultType",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "PRIORITY_RANK",
    "validate_transition",
    # Task
    "Task",
    "task_id_prefix",
    "format_task_id",
    "parse_task_number",
    # Note / Artifact
    "Note",
    "TagSet",
    "Artifact",
    # 项目上下文
    "ProjectContext",
    "ProjectContextView",
    "RecentNote",
    "RecentArtifact",
    # Feedback
    "Feedback",
    "RateLimitResult",
    # 检索 / 分页
    "SearchResult",
    "Page",
]
