# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from prometheus_client.metrics_core import Metric

    from nsq_exporter.common.enums import CollectorType
    from nsq_exporter.common.models import Snapshot

# Receives every metric family a collector emits or describes
MetricSink = Callable[["Metric"], None]


@runtime_checkable
class StatsCollectorProtocol(Protocol):
    """Protocol for stats collectors owning one entity class's labeled-value table.

    State machine::

        Empty --reset--> Empty --ingest--> Populated --emit--> Populated --reset--> Empty

    A single collector must not ingest concurrently with itself; distinct
    collectors own disjoint tables and may ingest in parallel.
    """

    collector_type: CollectorType

    def reset(self) -> None:
        """Drop every label-set held from the previous scrape."""
        ...

    def ingest(self, snapshot: Snapshot) -> None:
        """Add one label-set per field for every live entity in the snapshot."""
        ...

    def emit(self, sink: MetricSink) -> None:
        """Send the current table to the sink, one metric family per field."""
        ...

    def describe(self, sink: MetricSink) -> None:
        """Send the metric families this collector exposes, without samples."""
        ...

    def series_count(self) -> int:
        """Number of label-sets currently held."""
        ...
