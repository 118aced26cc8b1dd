"""structlog 配置模块

dev 模式：ConsoleRenderer 可读输出
json 模式：每行一个 JSON 对象

长字符串字段截断到 LOG_VALUE_MAX_LENGTH；uvicorn.access 与 aiosqlite 只输出 WARNING 以上。
"""

import logging

import structlog
from brain.core.config import LOG_VALUE_MAX_LENGTH, get_log_format, get_log_level

_QUIET_LOGGERS = ("uvicorn.access", "aiosqlite")


def truncate_long_values(
    logger: logging.Logger, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """截断超长字符串字段（event 本身除外）"""
    limit = LOG_VALUE_MAX_LENGTH
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > limit:
            event_dict[key] = f"{value[:limit]}...(+{len(value) - limit})"
    return event_dict


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog + 标准库 logging

    Args:
        log_format: "json" 或 "dev"，默认读 BRAIN_LOG_FORMAT
        log_level: 日志级别名，默认读 BRAIN_LOG_LEVEL
    """
    log_format = (log_format or get_log_format()).lower()
    level = getattr(logging, (log_level or get_log_level()).upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        truncate_long_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(
            ensure_ascii=False
        )
        # JSON 模式下异常堆栈以字符串字段输出
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
