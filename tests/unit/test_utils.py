"""Test utils module functionality."""

import logging
from collections.abc import Iterator

import pytest

from src.utils.logger import get_logger, log_function_call, setup_logging
from src.utils.mixins import LoggerMixin


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Iterator[None]:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    try:
        yield
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()


class TestLogger:
    """Test logging functionality."""

    def test_setup_logging(self):
        """Test logging setup doesn't raise errors."""
        setup_logging()
        assert logging.getLogger().handlers

    def test_no_file_handler_by_default(self):
        setup_logging()
        assert not any(
            isinstance(handler, logging.FileHandler)
            for handler in logging.getLogger().handlers
        )

    def test_setup_logging_writes_plain_message_to_file(
        self, tmp_path, monkeypatch: pytest.MonkeyPatch
    ):
        """Test log file output uses raw message format."""
        log_file = tmp_path / "logs" / "calendar.log"
        monkeypatch.setenv("LOG_FILE", str(log_file))

        setup_logging()

        test_message = "logging format check"
        logging.getLogger("format-check").info(test_message)

        root_logger = logging.getLogger()
        file_handlers = [
            handler
            for handler in root_logger.handlers
            if isinstance(handler, logging.FileHandler)
        ]
        assert file_handlers, "FileHandler is not configured"
        for handler in file_handlers:
            handler.flush()

        assert log_file.exists()
        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert lines, "log file is empty"
        assert lines[-1].endswith(test_message)

    def test_log_level_from_settings(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_get_logger_returns_logger(self):
        """Test get_logger returns a logger instance."""
        logger = get_logger("test")
        assert logger is not None
        assert hasattr(logger, "info")
        assert hasattr(logger, "error")
        assert hasattr(logger, "warning")

    def test_log_function_call(self):
        setup_logging()
        log_function_call("build", mode="month")


class TestLoggerMixin:
    """Test LoggerMixin functionality."""

    def test_logger_mixin(self):
        class Sample(LoggerMixin):
            pass

        logger = Sample().logger
        assert hasattr(logger, "info")
        assert hasattr(logger, "debug")

    def test_engine_classes_carry_logger(self):
        from src.calendar_view.selection import SelectionModel

        assert hasattr(SelectionModel().logger, "info")


class TestEnvironmentAwareLogging:
    """Development runs show source paths and traceback locals."""

    @staticmethod
    def _rich_handler():
        from rich.logging import RichHandler

        return next(
            handler
            for handler in logging.getLogger().handlers
            if isinstance(handler, RichHandler)
        )

    def test_development_shows_locals(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        setup_logging()
        assert self._rich_handler().tracebacks_show_locals

    def test_testing_hides_locals(self):
        setup_logging()
        assert not self._rich_handler().tracebacks_show_locals
