# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging

import pytest
from rich.console import Console

from nsq_exporter.common.logging import (
    MAX_CONSOLE_MESSAGE_LENGTH,
    CustomRichHandler,
    setup_rich_logging,
)
from nsq_exporter.common.mixins import LoggerMixin


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


class TestSetupRichLogging:
    """Tests for the logging setup."""

    def test_installs_single_rich_handler(self, restore_root_logger):
        """Test that repeated setup does not duplicate handlers."""
        setup_rich_logging("debug")
        setup_rich_logging("INFO")
        root = restore_root_logger
        rich_handlers = [h for h in root.handlers if isinstance(h, CustomRichHandler)]
        assert len(rich_handlers) == 1
        assert root.level == logging.INFO

    def test_quiets_aiohttp_access_log(self, restore_root_logger):
        setup_rich_logging(logging.DEBUG)
        assert logging.getLogger("aiohttp.access").level == logging.INFO

    def test_log_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "exporter.log"
        setup_rich_logging("INFO", log_file=log_file)
        logging.getLogger("test").info("written to file")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()


class TestCustomRichHandler:
    """Tests for the compact single-line layout."""

    def _render(self, message: str) -> str:
        console = Console(record=True, width=20000)
        handler = CustomRichHandler(console=console)
        record = logging.LogRecord("SnapshotFetcher", logging.WARNING, __file__, 42, message, None, None)
        handler.emit(record)
        return console.export_text()

    def test_layout(self):
        text = self._render("Failed to scrape nsqd stats")
        assert "WARNING" in text
        assert "Failed to scrape nsqd stats" in text
        assert "(SnapshotFetcher:42)" in text

    def test_truncates_long_messages(self):
        text = self._render("x" * (MAX_CONSOLE_MESSAGE_LENGTH + 100))
        assert text.count("x") == MAX_CONSOLE_MESSAGE_LENGTH


class _Component(LoggerMixin):
    pass


class TestLoggerMixin:
    """Tests for the LoggerMixin helpers."""

    def test_logger_named_after_class(self):
        assert _Component().logger.name == "_Component"

    def test_custom_logger_name(self):
        assert _Component(logger_name="custom").logger.name == "custom"

    def test_lazy_message_not_evaluated_when_disabled(self, caplog):
        component = _Component()
        calls = []

        def message() -> str:
            calls.append(1)
            return "expensive"

        with caplog.at_level(logging.INFO, logger="_Component"):
            component.debug(message)
        assert calls == []

    def test_lazy_message_evaluated_when_enabled(self, caplog):
        component = _Component()
        with caplog.at_level(logging.DEBUG, logger="_Component"):
            component.debug(lambda: "computed detail")
            assert component.is_debug_enabled()
        assert "computed detail" in caplog.text

    def test_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="_Component"):
            _Component().warning("nsqd unreachable")
        assert caplog.records[0].levelname == "WARNING"
        assert caplog.records[0].message == "nsqd unreachable"
