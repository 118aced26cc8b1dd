"""输入清洗工具

参数化查询是防注入的主手段；这里只负责规范化项目名/标签、
剥离危险 HTML 片段以及长度截断。
"""

import re

_PROJECT_INVALID_CHARS = re.compile(r"[^a-z0-9_-]")

# 保留 markdown，仅去除可执行片段
_DANGEROUS_CONTENT_PATTERNS = [
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
]

TAG_MAX_LENGTH = 50
TAGS_MAX_COUNT = 20


def truncate(value: str, max_length: int) -> str:
    """截断到 max_length 个字符"""
    if len(value) <= max_length:
        return value
    return value[:max_length]


def sanitize_project_name(value: str | None) -> str:
    """项目名规范化：小写，仅保留字母数字、连字符和下划线"""
    if not value:
        return ""
    return _PROJECT_INVALID_CHARS.sub("", value.lower())


def sanitize_tag(value: str) -> str:
    """单个标签规范化，规则与项目名一致（先去除首尾空白）"""
    return _PROJECT_INVALID_CHARS.sub("", value.strip().lower())


def sanitize_content(value: str, max_length: int = 50000) -> str:
    """去除 script/iframe/事件处理器等可执行片段，再截断"""
    sanitized = value
    for pattern in _DANGEROUS_CONTENT_PATTERNS:
        sanitized = pattern.sub("", sanitized)
    return truncate(sanitized, max_length)


def escape_like(value: str) -> str:
    """转义 LIKE 通配符，配合 ESCAPE '\\' 使用"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
