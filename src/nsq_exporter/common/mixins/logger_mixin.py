# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from collections.abc import Callable

# A log message, or a zero-argument callable producing one. Callables are only
# evaluated when the level is enabled, which keeps hot paths free of f-string cost.
LogMessage = str | Callable[[], str]


class LoggerMixin:
    """Mixin giving a class its own logger and level-named logging helpers.

    The logger name defaults to the class name, so log lines read
    ``(QueueStatsCollector:42)`` in the rich console output.

    Example::

        class MyComponent(LoggerMixin):
            def work(self) -> None:
                self.debug(lambda: f"Expensive detail: {self._state!r}")
                self.info("Work done")
    """

    def __init__(self, logger_name: str | None = None, **kwargs) -> None:
        self.logger = logging.getLogger(logger_name or self.__class__.__name__)
        super().__init__(**kwargs)

    def _log(self, level: int, message: LogMessage, **kwargs) -> None:
        if not self.logger.isEnabledFor(level):
            return
        if callable(message):
            message = message()
        # stacklevel=3 attributes the record to the caller of debug()/info()/...
        self.logger.log(level, message, stacklevel=3, **kwargs)

    def is_debug_enabled(self) -> bool:
        return self.logger.isEnabledFor(logging.DEBUG)

    def debug(self, message: LogMessage, **kwargs) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: LogMessage, **kwargs) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: LogMessage, **kwargs) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: LogMessage, **kwargs) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: LogMessage, **kwargs) -> None:
        self._log(logging.ERROR, message, exc_info=True, **kwargs)
