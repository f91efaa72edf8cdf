"""
Structured logging configuration using structlog.

Console output in development, one JSON object per line in production.

Usage:
    from core.logging import configure_logging, get_logger

    configure_logging(json_logs=settings.log_json)

    logger = get_logger(__name__)
    logger.info("Products fetched", count=42, limit=250)
    logger.warning("Lookup fetch failed", table="fabric_types", error=str(e))
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import Processor


# Supabase sits on top of httpx/postgrest; their per-request logs are noise
NOISY_LOGGERS = ("httpx", "httpcore", "postgrest", "hpack", "uvicorn.access")


def _build_processors(json_logs: bool, include_timestamp: bool) -> List[Processor]:
    processors: List[Processor] = []
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        ))
    return processors


def configure_logging(
    json_logs: bool = False,
    log_level: str = "INFO",
    include_timestamp: bool = True,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        json_logs: JSON lines (production) instead of console output
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        include_timestamp: Prefix every event with an ISO timestamp
    """
    level = getattr(logging, log_level.upper())

    structlog.configure(
        processors=_build_processors(json_logs, include_timestamp),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Structured logger, usually named after the calling module."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """
    Attach fields to every log line emitted in the current context.

    The request middleware binds request_id/method/path here.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


class LoggerMixin:
    """
    Gives a class a ``logger`` property named after the class.

    Usage:
        class GuidedChain(LoggerMixin):
            def start(self, step):
                self.logger.debug("Guided chain started", step=step.value)
    """

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(self.__class__.__name__)
