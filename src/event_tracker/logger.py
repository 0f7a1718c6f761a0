"""structlog setup plus the two helpers the app logs through."""

import logging
import sys
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from event_tracker.config import settings

SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.format_exc_info,
    structlog.processors.TimeStamper(fmt="iso"),
]


def renderer_for(debug: bool) -> Processor:
    # Console output while developing, one JSON object per line elsewhere
    return structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """Route structlog and stdlib records through one stdout handler."""
    structlog.configure(
        processors=[*SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer_for(settings.debug),
            foreign_pre_chain=SHARED_PROCESSORS,
        )
    )
    logging.basicConfig(handlers=[handler], level=logging.DEBUG if settings.debug else logging.INFO)


def get_logger(name: str | None = None) -> BoundLogger:
    return structlog.get_logger(name)


@asynccontextmanager
async def timed_query(query: str, logger: BoundLogger, **context: Any) -> AsyncIterator[dict[str, Any]]:
    """Debug-log how long a store query took.

    Keys the caller adds to the yielded dict (row counts, say) are logged too:

        async with timed_query("list_events", logger, user_id=user_id) as stats:
            stats["count"] = len(rows)
    """
    stats: dict[str, Any] = {}
    started = time.perf_counter()
    try:
        yield stats
    finally:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.debug("Store query finished", query=query, elapsed_ms=elapsed_ms, **context, **stats)


def log_exception(logger: BoundLogger, exc: BaseException, message: str, **context: Any) -> None:
    """Error-log ``exc`` with its traceback and type."""
    logger.error(
        message,
        exc_info=exc,
        error=str(exc),
        error_type=type(exc).__name__,
        **context,
    )
