# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Rich console logging for the exporter process.

The exporter is a single long-running process, so logging is configured once
at startup by :func:`setup_rich_logging`. Every log line renders as::

    HH:MM:SS.mmm LEVEL    message content (logger_name:lineno)

Usage::

    from nsq_exporter.common.logging import setup_rich_logging

    setup_rich_logging("DEBUG")
"""

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console, ConsoleRenderable, Group
from rich.logging import RichHandler
from rich.text import Text
from rich.traceback import Traceback

_logger = logging.getLogger(__name__)

MAX_CONSOLE_MESSAGE_LENGTH = 4096

# Libraries that are chatty at DEBUG and add nothing to exporter diagnostics
_QUIET_LOGGERS = ("aiohttp.access", "asyncio")


def setup_rich_logging(log_level: str | int, log_file: Path | None = None) -> None:
    """Install the rich console handler (and optionally a file handler) on the root logger.

    Existing root handlers are removed so repeated calls do not duplicate output.

    Args:
        log_level: Level name or number applied to the root logger and handlers.
        log_file: Optional path of a plain-text log file to write alongside the console.
    """
    level = log_level.upper() if isinstance(log_level, str) else log_level
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)

    rich_handler = CustomRichHandler(
        rich_tracebacks=True,
        show_path=False,
        console=Console(stderr=True),
        show_time=False,
        show_level=False,
        tracebacks_show_locals=False,
    )
    rich_handler.setLevel(level)
    root_logger.addHandler(rich_handler)

    if log_file is not None:
        root_logger.addHandler(create_file_handler(log_file, level))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.INFO, root_logger.level))

    _logger.debug("Logging initialized with level: %s", level)


def create_file_handler(log_file: Path, level: str | int) -> logging.FileHandler:
    """Configure a file handler for logging."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return file_handler


class CustomRichHandler(RichHandler):
    """Rich logging handler with a compact single-line format.

    Each record is rendered as a millisecond timestamp, a colored fixed-width
    level, the message, and a dim ``(logger_name:lineno)`` suffix. Messages
    longer than ``MAX_CONSOLE_MESSAGE_LENGTH`` are truncated. Exception
    tracebacks render with Rich formatting when ``rich_tracebacks=True``.
    """

    LOG_LEVEL_STYLES = {
        "DEBUG": "dim",
        "INFO": "cyan",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold red",
    }

    def render(
        self,
        *,
        record: logging.LogRecord,
        traceback: Traceback | None,
        message_renderable: ConsoleRenderable,
    ) -> ConsoleRenderable:
        """Render a log record into a styled Rich renderable.

        Returns:
            A Text, or a Group of the Text and the traceback when one is given.
        """
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        level_style = self.LOG_LEVEL_STYLES.get(record.levelname, "white")
        message = record.getMessage()[:MAX_CONSOLE_MESSAGE_LENGTH]

        formatted_log = Text.assemble(
            Text(f"{timestamp} ", style="log.time"),
            Text(f"{record.levelname:<8} ", style=level_style),
            Text(f"{message} "),
            Text(f"({record.name}:{record.lineno})", style="dim italic"),
        )
        return Group(formatted_log, traceback) if traceback else formatted_log

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the console using the custom layout."""
        traceback = None
        if (
            self.rich_tracebacks
            and record.exc_info
            and record.exc_info != (None, None, None)
        ):
            traceback = Traceback.from_exception(*record.exc_info)

        log_renderable = self.render(
            record=record, traceback=traceback, message_renderable=Text("")
        )
        self.console.print(log_renderable, soft_wrap=True)
