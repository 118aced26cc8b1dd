"""Brain 异常体系

NotFound 不是异常：按 id 查询/删除时以 None / False 返回。
镜像写入失败在 MirrorNotifier 内部吞掉并记录日志，不会出现在这里。
"""


class BrainError(Exception):
    """Brain 基础异常"""


class DomainError(BrainError):
    """领域规则违反（非法状态流转、非法输入等），由请求层映射为 4xx"""


class ProjectRequiredError(DomainError):
    """项目名为空，或清洗后为空"""

    def __init__(self, raw_project: str = "") -> None:
        super().__init__("Project is required")
        self.raw_project = raw_project


class TitleRequiredError(DomainError):
    """任务标题为空或只含空白"""

    def __init__(self) -> None:
        super().__init__("Title is required")


class TaskStateError(DomainError):
    """任务当前状态不允许该操作"""

    def __init__(self, task_id: str, status: str, action: str = "activate") -> None:
        """
        Args:
            task_id: 任务 ID
            status: 任务当前状态
            action: 被拒绝的操作名
        """
        super().__init__(f"cannot {action}: status={status}")
        self.task_id = task_id
        self.status = status
        self.action = action


class TaskIdConflictError(BrainError):
    """Task ID 分配多次重试后仍然冲突"""

    def __init__(self, prefix: str, attempts: int) -> None:
        super().__init__(
            f"failed to allocate task id for prefix {prefix} after {attempts} attempts"
        )
        self.prefix = prefix
        self.attempts = attempts
