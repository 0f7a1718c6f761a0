"""Tests for logging helpers."""

from unittest.mock import MagicMock

import pytest
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer

from event_tracker import logger as logger_module


def test_renderer_is_console_in_debug() -> None:
    assert isinstance(logger_module.renderer_for(True), ConsoleRenderer)


def test_renderer_is_json_otherwise() -> None:
    assert isinstance(logger_module.renderer_for(False), JSONRenderer)


@pytest.mark.asyncio
async def test_timed_query_logs_elapsed_time_and_stats() -> None:
    log = MagicMock()

    async with logger_module.timed_query("list_events", log, user_id=7) as stats:
        stats["count"] = 3

    log.debug.assert_called_once()
    args, kwargs = log.debug.call_args
    assert args == ("Store query finished",)
    assert kwargs["query"] == "list_events"
    assert kwargs["user_id"] == 7
    assert kwargs["count"] == 3
    assert kwargs["elapsed_ms"] >= 0


@pytest.mark.asyncio
async def test_timed_query_logs_even_when_query_fails() -> None:
    log = MagicMock()

    with pytest.raises(RuntimeError):
        async with logger_module.timed_query("get_event", log):
            raise RuntimeError("boom")

    log.debug.assert_called_once()


def test_log_exception_includes_traceback_and_type() -> None:
    log = MagicMock()
    exc = ValueError("bad input")

    logger_module.log_exception(log, exc, "Failed to parse", event_id=5)

    log.error.assert_called_once_with(
        "Failed to parse",
        exc_info=exc,
        error="bad input",
        error_type="ValueError",
        event_id=5,
    )


def test_get_logger_returns_bound_logger() -> None:
    log = logger_module.get_logger("event_tracker.tests")
    assert hasattr(log, "info")
