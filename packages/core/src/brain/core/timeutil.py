"""时间工具

数据库中的时间统一存为带微秒的 UTC ISO-8601 字符串，
格式固定，因此字符串比较与时间先后一致。
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """当前 UTC 时间"""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """转换为带时区的 UTC 时间（naive 视为 UTC）"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_db_time(value: datetime) -> str:
    """datetime -> 数据库时间字符串"""
    return as_utc(value).isoformat(timespec="microseconds")


def from_db_time(value: str | None) -> datetime | None:
    """数据库时间字符串 -> datetime"""
    if value is None:
        return None
    return datetime.fromisoformat(value)
