"""
Logging setup.

Engine modules log through ``structlog.get_logger()``. Callers embedding the
engine pick the renderer: JSON lines for log shipping, or the console
renderer for local runs. ``configure_logging_from_settings`` reads both
choices from ``AXADVISOR_LOG_LEVEL`` and ``AXADVISOR_LOG_FORMAT``.
"""

import logging
from typing import Any

import structlog


def configure_logging(level: int | str = logging.INFO, fmt: str = "json") -> None:
    """Configure structlog/standard logging bridge."""

    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    renderer: Any
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s")


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Bind contextual fields for downstream logs."""

    logger = structlog.get_logger()
    return logger.bind(**kwargs)


def configure_logging_from_settings(settings: Any = None) -> None:
    """Configure logging from ``AXADVISOR_LOG_LEVEL`` / ``AXADVISOR_LOG_FORMAT``."""

    from axadvisor.config.settings import get_settings

    settings = settings or get_settings()
    configure_logging(level=settings.log_level.upper(), fmt=settings.log_format)
