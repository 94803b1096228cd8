# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Helpers shared by the CLI commands."""

import sys
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from nsq_exporter.common.exceptions import NSQExporterError

__all__ = ["exit_on_error"]


@contextmanager
def exit_on_error(
    title: str = "Error",
    console: Console | None = None,
    exit_code: int = 1,
) -> Iterator[None]:
    """Render any error raised inside the block as a rich panel and exit.

    Exporter errors are shown by message only; anything else also gets its
    traceback. ``KeyboardInterrupt`` and ``SystemExit`` pass through.
    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit):
        raise
    except Exception as e:
        console = console or Console(stderr=True)
        if isinstance(e, NSQExporterError | OSError):
            console.print(
                Panel(
                    Text(str(e), style="bold"),
                    title=title,
                    title_align="left",
                    border_style="red",
                )
            )
        else:
            console.print_exception(show_locals=False)
            console.print(
                Panel(
                    Text(f"{type(e).__name__}: {e}", style="bold"),
                    title=title,
                    title_align="left",
                    border_style="red",
                )
            )
        sys.exit(exit_code)
