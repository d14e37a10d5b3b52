"""structlog 配置模块

QUADRANT_LOG_FORMAT:
- "dev"（默认）: 彩色控制台输出
- "json": 每行一个 JSON 对象
QUADRANT_LOG_LEVEL: 根日志级别，默认 INFO
"""

import logging
import os

import structlog

# 每条 SQL 都会打 debug 日志的第三方 logger
_NOISY_LOGGERS = ("aiosqlite", "uvicorn.access")


def _select_renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging() -> None:
    """初始化 structlog + 标准库 logging，重复调用会替换已有 handler"""
    log_format = os.environ.get("QUADRANT_LOG_FORMAT", "dev").lower()
    log_level = getattr(
        logging,
        os.environ.get("QUADRANT_LOG_LEVEL", "INFO").upper(),
        logging.INFO,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_format == "json":
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_select_renderer(log_format),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
