"""Structured logging for clearhead.

Wraps structlog so every engine logs transitions as an event name plus
key/value context. Console output is the default; JSON output can be
switched on through ``CLEARHEAD_LOG_JSON`` for log shipping.
"""

import logging
import sys
from typing import Any

import structlog

__all__ = [
    "configure_logging",
    "get_logger",
]


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: int | str = logging.INFO,
    json_output: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Logging level as int or name ("DEBUG", "INFO", ...)
        json_output: If True, render JSON lines; otherwise pretty console output
        add_timestamp: If True, prepend an ISO timestamp to every event
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if json_output:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=_resolve_level(level),
    )

    # The mongo driver is chatty at INFO
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("motor").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, usually with ``__name__`` of the caller."""
    return structlog.get_logger(name)


_configured = False


def _ensure_configured() -> None:
    """Configure logging once from ``CLEARHEAD_LOG_*`` settings."""
    global _configured
    if _configured:
        return
    from clearhead.config import LogSettings

    settings = LogSettings()
    configure_logging(level=settings.level, json_output=settings.json_output)
    _configured = True


_ensure_configured()
