"""
Tests for shared_utils.logging_utils.

Covers configure_logging(), get_scoped_logger(), the LogLevel enum, the
log_execution() decorator and ContextualLogger.
"""

from unittest.mock import MagicMock, patch

import pytest
import structlog

from shared_utils.logging_utils import (
    ContextualLogger,
    LogLevel,
    configure_logging,
    get_scoped_logger,
    log_execution,
)
from shared_utils.constants import LogScope


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_production_renders_json(self) -> None:
        with patch("shared_utils.logging_utils.structlog.configure") as mock_configure:
            configure_logging("production")
        processors = mock_configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_renders_console(self) -> None:
        with patch("shared_utils.logging_utils.structlog.configure") as mock_configure:
            configure_logging("development", level="DEBUG")
        processors = mock_configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


# ---------------------------------------------------------------------------
# get_scoped_logger
# ---------------------------------------------------------------------------


class TestGetScopedLogger:
    def test_returns_bound_logger(self) -> None:
        logger = get_scoped_logger(LogScope.API)
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "error", None))

    def test_different_scopes(self) -> None:
        """Calling with different scopes should not crash."""
        for scope in (LogScope.DETECTION, LogScope.SCORING, LogScope.EXTRACTION, LogScope.CALENDAR):
            assert get_scoped_logger(scope) is not None


# ---------------------------------------------------------------------------
# LogLevel enum
# ---------------------------------------------------------------------------


class TestLogLevel:
    def test_values(self) -> None:
        assert LogLevel.DEBUG == "DEBUG"
        assert LogLevel.INFO == "INFO"
        assert LogLevel.CRITICAL == "CRITICAL"

    def test_membership(self) -> None:
        assert len(LogLevel) == 5


# ---------------------------------------------------------------------------
# log_execution decorator
# ---------------------------------------------------------------------------


class TestLogExecution:
    def test_passes_through_return_value(self) -> None:
        @log_execution(scope=LogScope.DETECTION)
        def add(a: int, b: int) -> int:
            return a + b

        assert add(2, 3) == 5

    def test_propagates_exception(self) -> None:
        @log_execution(scope=LogScope.DETECTION)
        def boom() -> None:
            raise ValueError("oops")

        with pytest.raises(ValueError, match="oops"):
            boom()

    def test_preserves_function_name(self) -> None:
        @log_execution(scope=LogScope.DETECTION)
        def my_func() -> None:
            pass

        assert my_func.__name__ == "my_func"

    def test_emits_start_and_success(self) -> None:
        mock_logger = MagicMock()

        @log_execution(scope=LogScope.CALENDAR, level=LogLevel.DEBUG.value)
        def fetch() -> list:
            return []

        with patch("shared_utils.logging_utils.get_scoped_logger", return_value=mock_logger):
            fetch()

        events = [c.args[0] for c in mock_logger.debug.call_args_list]
        assert events == ["fetch_start", "fetch_success"]

    def test_failure_logged_as_error(self) -> None:
        mock_logger = MagicMock()

        @log_execution(scope=LogScope.CALENDAR)
        def fail() -> None:
            raise RuntimeError("down")

        with patch("shared_utils.logging_utils.get_scoped_logger", return_value=mock_logger):
            with pytest.raises(RuntimeError):
                fail()

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["error_type"] == "RuntimeError"


# ---------------------------------------------------------------------------
# ContextualLogger
# ---------------------------------------------------------------------------


class TestContextualLogger:
    def test_all_levels_callable(self) -> None:
        cl = ContextualLogger(scope=LogScope.DETECTION)
        for method_name in ("info", "debug", "warning", "error", "critical"):
            assert callable(getattr(cl, method_name))

    def test_info_does_not_raise(self) -> None:
        ContextualLogger(scope=LogScope.DETECTION).info("test_event", key="value")

    def test_scope_stored(self) -> None:
        assert ContextualLogger(scope=LogScope.STATS).scope == LogScope.STATS

    def test_bind_returns_child(self) -> None:
        parent = ContextualLogger(scope=LogScope.CALENDAR)
        child = parent.bind(provider="google")
        assert child is not parent
        assert child.scope == LogScope.CALENDAR
        child.warning("provider_slow", elapsed=3.2)
