# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Main CLI entry point for the NSQ exporter."""

################################################################################
# NOTE: Keep the imports here to a minimum. This file is read every time
# the CLI is run, including to generate the help text.
################################################################################

from typing import Annotated

from cyclopts import App, Parameter

from nsq_exporter.cli_utils import exit_on_error
from nsq_exporter.common.config import ExporterConfig

app = App(name="nsq-exporter", help="Prometheus exporter for nsqd stats")


@app.command(name="serve")
def serve(
    config: Annotated[ExporterConfig | None, Parameter(name="*")] = None,
) -> None:
    """Serve the nsqd stats as Prometheus metrics.

    Args:
        config: Exporter configuration
    """
    with exit_on_error(title="Error Running NSQ Exporter"):
        from nsq_exporter.cli_runner import run_exporter
        from nsq_exporter.common.config import load_exporter_config

        run_exporter(config or load_exporter_config())


@app.command(name="collectors")
def collectors() -> None:
    """List the available stats collectors."""
    from rich.console import Console

    import nsq_exporter.collectors  # noqa: F401  (registers the collectors)
    from nsq_exporter.common.factories import StatsCollectorFactory

    console = Console()
    for collector_type in StatsCollectorFactory.get_all_class_types():
        console.print(str(collector_type))
