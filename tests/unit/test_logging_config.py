"""Tests for the logging configuration helpers."""

import logging

import pytest

from sonarmark.logging import (
    configure_logging,
    get_logger,
    is_debug_mode,
    set_debug_mode,
)
from sonarmark.logging.config import ColorFormatter


@pytest.fixture(autouse=True)
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    set_debug_mode(False)
    logging.getLogger("sonarmark").setLevel(logging.NOTSET)


class TestGetLogger:
    def test_returns_named_logger(self):
        assert get_logger("sonarmark.client").name == "sonarmark.client"

    def test_http_library_loggers_are_quiet(self):
        assert get_logger("httpx").level == logging.WARNING


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_single_stderr_handler(self):
        configure_logging()
        configure_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].level == logging.WARNING

    def test_level_by_name(self):
        configure_logging(console_level="ERROR")

        assert logging.getLogger().handlers[0].level == logging.ERROR

    def test_debug_mode(self):
        configure_logging(config={"debug_mode": True})

        assert is_debug_mode()
        assert logging.getLogger().handlers[0].level == logging.DEBUG
        assert logging.getLogger("sonarmark").level == logging.DEBUG

    def test_debug_mode_off(self):
        configure_logging(config={"debug_mode": False})

        assert not is_debug_mode()
        assert logging.getLogger("sonarmark").level == logging.INFO


class TestColorFormatter:
    def test_colors_level_without_mutating_record(self):
        formatter = ColorFormatter("%(levelname)s %(message)s")
        record = logging.LogRecord("sonarmark", logging.ERROR, __file__, 1, "boom", None, None)

        formatted = formatter.format(record)

        assert "\033[91m" in formatted
        assert formatted.endswith("boom")
        assert record.levelname == "ERROR"
