"""枚举定义

包含 TaskStatus 状态机、TrustLevel、Priority、检索实体类型等枚举，
以及 VALID_TRANSITIONS 合法流转映射、TERMINAL_STATES 终态集合和 PRIORITY_RANK 排序键。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态机"""

    QUEUED = "queued"
    ACTIVE = "active"

    # 终态
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# 合法流转（由用户操作触发）
# ACTIVE -> QUEUED 只作为同项目其他任务激活时的降级副作用出现，不在此表中
VALID_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.QUEUED: {TaskStatus.ACTIVE, TaskStatus.CANCELLED},
    TaskStatus.ACTIVE: {
        TaskStatus.ACTIVE,
        TaskStatus.COMPLETED,
        TaskStatus.CANCELLED,
    },
    # 终态不可再流转
    TaskStatus.COMPLETED: set(),
    TaskStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[TaskStatus] = {
    TaskStatus.COMPLETED,
    TaskStatus.CANCELLED,
}


class TrustLevel(StrEnum):
    """任务成熟度标记（仅信息性）"""

    THROWAWAY = "THROWAWAY"
    PROTOTYPE = "PROTOTYPE"
    MATURE = "MATURE"


class Priority(StrEnum):
    """任务优先级"""

    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


# 排队顺序：数值越小越靠前
PRIORITY_RANK: dict[Priority, int] = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.NORMAL: 2,
    Priority.LOW: 3,
}


class ContentType(StrEnum):
    """Artifact 内容类型"""

    CODE = "code"
    MARKDOWN = "markdown"
    JSON = "json"


class SearchEntityType(StrEnum):
    """检索范围（请求参数取值）"""

    NOTES = "notes"
    ARTIFACTS = "artifacts"
    TASKS = "tasks"


class SearchResultType(StrEnum):
    """检索结果类型"""

    NOTE = "note"
    ARTIFACT = "artifact"
    TASK = "task"


def validate_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
    """验证状态流转是否合法

    Args:
        from_status: 当前状态
        to_status: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_status, set())
    return to_status in allowed
