"""Task Domain Model

Task ID 格式为 <PREFIX>-<NNN>：PREFIX 为项目名大写后截断到 10 个字符，
NNN 为同一前缀内单调递增的序号，至少补零到 3 位，超过 999 不受限。
"""

import re
from datetime import datetime

from pydantic import BaseModel, Field

from ..config import TASK_PREFIX_MAX_LENGTH
from .enums import Priority, TaskStatus, TrustLevel

_TASK_NUMBER_PATTERN = re.compile(r"[0-9]+")


def task_id_prefix(project: str) -> str:
    """由（已清洗的）项目名计算 Task ID 前缀"""
    return project.upper()[:TASK_PREFIX_MAX_LENGTH]


def format_task_id(prefix: str, number: int) -> str:
    """拼装 Task ID，序号至少 3 位补零"""
    return f"{prefix}-{number:03d}"


def parse_task_number(task_id: str, prefix: str) -> int | None:
    """解析 "<prefix>-<纯数字>" 形式 Task ID 的序号

    前缀必须完全一致：DEMO-X-001 不属于前缀 DEMO，返回 None。
    """
    head, sep, suffix = task_id.rpartition("-")
    if not sep or head != prefix or not _TASK_NUMBER_PATTERN.fullmatch(suffix):
        return None
    return int(suffix)


class Task(BaseModel):
    """Task 数据模型

    status / started_at / completed_at 只能由 TaskService 写入。
    """

    id: str = Field(description="任务 ID，格式 PREFIX-NNN")
    title: str = Field(description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    project: str = Field(description="所属项目（已清洗的 slug）")
    status: TaskStatus = Field(default=TaskStatus.QUEUED, description="当前状态")
    trust_level: TrustLevel = Field(default=TrustLevel.PROTOTYPE, description="成熟度")
    priority: Priority = Field(default=Priority.NORMAL, description="优先级")
    created_at: datetime = Field(description="创建时间")
    started_at: datetime | None = Field(default=None, description="首次激活时间")
    completed_at: datetime | None = Field(default=None, description="完成时间")
