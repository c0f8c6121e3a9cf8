"""Tests for configure_logging."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
from rich.logging import RichHandler

from mcpkit.utils.logging_setup import DATE_FORMAT, LOG_FORMAT, configure_logging


@pytest.fixture(autouse=True)
def _restore_mcpkit_logger() -> Iterator[None]:
    logger = logging.getLogger("mcpkit")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


class TestConfigureLogging:
    def test_rich_handler(self) -> None:
        handler = configure_logging("DEBUG")
        logger = logging.getLogger("mcpkit")
        assert isinstance(handler, RichHandler)
        assert handler in logger.handlers
        assert logger.level == logging.DEBUG

    def test_plain_format(self) -> None:
        handler = configure_logging("warning", rich=False)
        assert not isinstance(handler, RichHandler)
        assert handler.formatter is not None
        assert handler.formatter._fmt == LOG_FORMAT
        assert handler.formatter.datefmt == DATE_FORMAT
        assert logging.getLogger("mcpkit").level == logging.WARNING

    def test_plain_line_shape(self) -> None:
        handler = configure_logging("INFO", rich=False)
        record = logging.LogRecord(
            "mcpkit.core.registry", logging.INFO, __file__, 1, "Registered tool: %s", ("add",), None
        )
        line = handler.format(record)
        assert line.endswith("] INFO  | Registered tool: add")
        assert line.startswith("[")

    def test_reconfigure_replaces_handler(self) -> None:
        first = configure_logging("INFO")
        second = configure_logging("INFO", rich=False)
        handlers = logging.getLogger("mcpkit").handlers
        assert second in handlers
        assert first not in handlers

    def test_numeric_level(self) -> None:
        configure_logging(logging.ERROR)
        assert logging.getLogger("mcpkit").level == logging.ERROR
