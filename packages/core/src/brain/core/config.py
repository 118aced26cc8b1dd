"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、Vault 镜像目录、检索与反馈限流参数等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("BRAIN_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "BRAIN_DB_PATH",
        str(_get_base_dir() / "sqlite" / "brain.db"),
    )


def get_vault_path() -> Path | None:
    """获取 Vault 镜像根目录，未配置时返回 None（镜像关闭）"""
    raw = os.environ.get("BRAIN_VAULT_PATH", "")
    if not raw:
        return None
    return Path(raw)


def get_log_format() -> str:
    """日志渲染模式：dev（默认）或 json"""
    return os.environ.get("BRAIN_LOG_FORMAT", "dev")


def get_log_level() -> str:
    """日志级别名"""
    return os.environ.get("BRAIN_LOG_LEVEL", "INFO")


# 日志中单个字符串字段的最大长度
LOG_VALUE_MAX_LENGTH: int = 500

# Task 字段长度限制
TASK_TITLE_MAX_LENGTH: int = 200
TASK_DESCRIPTION_MAX_LENGTH: int = 10000

# Task ID 前缀最大长度（项目名大写后截断）
TASK_PREFIX_MAX_LENGTH: int = 10

# Task ID 分配冲突时的最大重试次数
TASK_ID_MAX_RETRIES: int = 3

# 笔记 / Artifact 内容最大长度
CONTENT_MAX_LENGTH: int = 50000

# 项目上下文：summary / conventions 最大长度
CONTEXT_TEXT_MAX_LENGTH: int = 10000

# 项目上下文：tech_stack 单条最大长度与最多条数
TECH_STACK_ITEM_MAX_LENGTH: int = 100
TECH_STACK_MAX_ITEMS: int = 50

# 项目上下文附带的最近笔记 / Artifact 条数，笔记正文预览长度
CONTEXT_RECENT_LIMIT: int = 5
CONTEXT_NOTE_PREVIEW_LENGTH: int = 200

# 反馈消息最大长度
FEEDBACK_MESSAGE_MAX_LENGTH: int = 1000

# 检索摘要长度
SNIPPET_MAX_LENGTH: int = int(os.environ.get("BRAIN_SNIPPET_MAX_LENGTH", "150"))

# 检索默认返回条数
SEARCH_DEFAULT_LIMIT: int = int(os.environ.get("BRAIN_SEARCH_DEFAULT_LIMIT", "20"))

# 联想词最小输入长度
SUGGESTION_MIN_LENGTH: int = 2

# 反馈限流：窗口内最大提交次数
FEEDBACK_DAILY_LIMIT: int = int(os.environ.get("BRAIN_FEEDBACK_DAILY_LIMIT", "2"))

# 反馈限流：滑动窗口长度（秒）
FEEDBACK_WINDOW_SECONDS: int = int(
    os.environ.get("BRAIN_FEEDBACK_WINDOW_SECONDS", "86400")
)
