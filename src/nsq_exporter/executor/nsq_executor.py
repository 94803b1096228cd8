# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Scrape orchestration for the NSQ exporter.

One scrape is one fetch of the nsqd stats document followed by a refresh of
every registered stats collector:

1. Fetch the snapshot (the only step whose failure fails the scrape)
2. Reset every collector, whether or not the fetch succeeded
3. Ingest the snapshot into every collector, concurrently or in order
4. Observe the scrape duration, labeled by result (and collector)

Emission is pull based: the executor is a ``prometheus_client`` custom
collector registered in an explicitly owned ``CollectorRegistry``, and its
:meth:`NSQExecutor.collect` emits every collector's table serially when the
registry is rendered.

Collectors are reset even when the fetch fails, so a failed scrape exposes
no collector series at all instead of the values of the last successful one.
"""

import asyncio
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from prometheus_client import CollectorRegistry, Summary, generate_latest
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.metrics_core import Metric

from nsq_exporter.collectors.protocols import StatsCollectorProtocol
from nsq_exporter.common.constants import DEFAULT_NAMESPACE
from nsq_exporter.common.enums import ScrapeResult, TimingGranularity
from nsq_exporter.common.exceptions import (
    ConfigurationError,
    DecodeError,
    NSQExporterError,
    TransportError,
)
from nsq_exporter.common.mixins import LoggerMixin
from nsq_exporter.common.models import Snapshot
from nsq_exporter.snapshot.snapshot_fetcher import SnapshotFetcher

__all__ = ["DaemonState", "NSQExecutor", "ScrapeOutcome"]


@dataclass(frozen=True)
class ScrapeOutcome:
    """Result of one scrape."""

    result: ScrapeResult
    duration: float
    error: NSQExporterError | None = None
    collector_durations: dict[str, float] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.result == ScrapeResult.SUCCESS


@dataclass(frozen=True)
class DaemonState:
    """Node level facts of the last scrape."""

    up: bool
    version: str = ""
    health: str = ""
    start_time: int = 0
    queue_count: int = 0

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "DaemonState":
        return cls(
            up=True,
            version=snapshot.version,
            health=snapshot.health,
            start_time=snapshot.start_time,
            queue_count=len(snapshot.queues),
        )


class NSQExecutor(LoggerMixin):
    """Collects all NSQ metrics from the registered stats collectors.

    Implements the ``prometheus_client`` custom collector interface
    (``collect``/``describe``) and registers itself into ``registry`` on
    construction. Besides the collectors' gauges it exposes:

    - ``<namespace>_exporter_scrape_duration_seconds`` summary labeled by
      ``result`` (and ``collector`` with per-collector timing granularity)
    - ``<namespace>_up``: 1 if the last fetch succeeded, else 0
    - ``<namespace>_info{version,health}``, ``<namespace>_start_time_seconds``
      and ``<namespace>_queue_count`` after a successful scrape

    Args:
        fetcher: Fetcher of the nsqd stats document
        collectors: Stats collectors, registered for the process lifetime
        namespace: Metric name prefix
        registry: Registry to register into; a private one is created when None
        concurrent_ingest: Ingest into the collectors as parallel thread tasks
        timing_granularity: Observe one duration per scrape or per collector
    """

    def __init__(
        self,
        fetcher: SnapshotFetcher,
        collectors: Iterable[StatsCollectorProtocol] = (),
        namespace: str = DEFAULT_NAMESPACE,
        registry: CollectorRegistry | None = None,
        concurrent_ingest: bool = True,
        timing_granularity: TimingGranularity = TimingGranularity.SCRAPE,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._fetcher = fetcher
        self._collectors: list[StatsCollectorProtocol] = []
        for collector in collectors:
            self.use(collector)
        self._namespace = namespace
        self._concurrent_ingest = concurrent_ingest
        self._timing_granularity = TimingGranularity(timing_granularity)
        self._scrape_lock = asyncio.Lock()
        self._daemon_state: DaemonState | None = None
        self._last_outcome: ScrapeOutcome | None = None

        labelnames = ["result"]
        if self._timing_granularity == TimingGranularity.COLLECTOR:
            labelnames.append("collector")
        # Not registered on its own: emitted through collect() below
        self._scrape_duration = Summary(
            "scrape_duration_seconds",
            "Duration of a scrape job of the NSQ exporter",
            labelnames,
            namespace=namespace,
            subsystem="exporter",
            registry=None,
        )

        self._registry = registry if registry is not None else CollectorRegistry()
        self._registry.register(self)

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    @property
    def collectors(self) -> list[StatsCollectorProtocol]:
        return list(self._collectors)

    @property
    def last_outcome(self) -> ScrapeOutcome | None:
        return self._last_outcome

    def use(self, collector: StatsCollectorProtocol) -> None:
        """Register an additional stats collector.

        Collectors are meant to be registered once at startup, before the first scrape.

        Raises:
            ConfigurationError: If a collector of the same type is already registered.
        """
        if any(c.collector_type == collector.collector_type for c in self._collectors):
            raise ConfigurationError(
                f"Stats collector '{collector.collector_type}' registered twice"
            )
        self._collectors.append(collector)

    async def scrape(self) -> ScrapeOutcome:
        """Run one full scrape. Fetch failures are reported in the outcome, never raised."""
        async with self._scrape_lock:
            return await self._scrape()

    async def scrape_and_render(self) -> bytes:
        """Run one scrape and render the registry in the Prometheus text format."""
        async with self._scrape_lock:
            await self._scrape()
            return generate_latest(self._registry)

    async def _scrape(self) -> ScrapeOutcome:
        start = time.perf_counter()
        snapshot: Snapshot | None = None
        error: NSQExporterError | None = None
        try:
            snapshot = await self._fetcher.fetch()
        except (TransportError, DecodeError) as e:
            error = e
            self.warning(f"Failed to scrape nsqd stats: {e}")
        fetch_duration = time.perf_counter() - start

        result = ScrapeResult.SUCCESS if snapshot is not None else ScrapeResult.ERROR
        # Node metrics describe the same fetch as the collectors, cancelled or not
        self._daemon_state = (
            DaemonState.from_snapshot(snapshot)
            if snapshot is not None
            else DaemonState(up=False)
        )
        try:
            collector_durations = await self._refresh_collectors(snapshot)
        except asyncio.CancelledError:
            self._record(ScrapeResult.ERROR, start, fetch_duration, {}, error)
            self.debug(lambda: f"Scrape of {self._fetcher.url} was cancelled")
            raise
        return self._record(result, start, fetch_duration, collector_durations, error)

    def _record(
        self,
        result: ScrapeResult,
        start: float,
        fetch_duration: float,
        collector_durations: dict[str, float],
        error: NSQExporterError | None,
    ) -> ScrapeOutcome:
        duration = time.perf_counter() - start
        self._observe(result, duration, fetch_duration, collector_durations)
        outcome = ScrapeOutcome(
            result=result,
            duration=duration,
            error=error,
            collector_durations=collector_durations,
        )
        self._last_outcome = outcome
        self.debug(
            lambda: f"Scrape of {self._fetcher.url} finished with {result} in {duration:.3f}s"
        )
        return outcome

    async def _refresh_collectors(self, snapshot: Snapshot | None) -> dict[str, float]:
        """Reset every collector and ingest the snapshot, if any, into each of them.

        All collectors are refreshed before this returns, so emission never
        sees a partially ingested collector.
        """
        if not self._concurrent_ingest:
            return dict(
                self._refresh_collector(collector, snapshot)
                for collector in self._collectors
            )

        # One thread task per collector, joined before emission
        gathered = asyncio.ensure_future(
            asyncio.gather(
                *[
                    asyncio.to_thread(self._refresh_collector, collector, snapshot)
                    for collector in self._collectors
                ]
            )
        )
        try:
            results = await asyncio.shield(gathered)
        except asyncio.CancelledError:
            # Let in-flight ingests finish so no collector is left half populated
            await asyncio.wait([gathered])
            raise
        return dict(results)

    def _refresh_collector(
        self, collector: StatsCollectorProtocol, snapshot: Snapshot | None
    ) -> tuple[str, float]:
        start = time.perf_counter()
        collector.reset()
        if snapshot is not None:
            collector.ingest(snapshot)
        return str(collector.collector_type), time.perf_counter() - start

    def _observe(
        self,
        result: ScrapeResult,
        duration: float,
        fetch_duration: float,
        collector_durations: dict[str, float],
    ) -> None:
        if self._timing_granularity == TimingGranularity.SCRAPE:
            self._scrape_duration.labels(result=str(result)).observe(duration)
            return
        if not collector_durations:
            # No collector timed: keep one observation per scrape
            self._scrape_duration.labels(result=str(result), collector="").observe(
                duration
            )
            return
        for name, collector_duration in collector_durations.items():
            self._scrape_duration.labels(result=str(result), collector=name).observe(
                fetch_duration + collector_duration
            )

    def collect(self) -> Iterator[Metric]:
        """Emit every collector's current table, the node metrics and the scrape summary."""
        families: list[Metric] = []
        for collector in self._collectors:
            collector.emit(families.append)
        families.extend(self._daemon_families())
        families.extend(self._scrape_duration.collect())
        yield from families

    def describe(self) -> Iterator[Metric]:
        families: list[Metric] = []
        for collector in self._collectors:
            collector.describe(families.append)
        families.extend(self._daemon_families(DaemonState(up=True)))
        families.extend(self._scrape_duration.describe())
        yield from families

    def _daemon_families(self, state: DaemonState | None = None) -> list[Metric]:
        state = state or self._daemon_state
        if state is None:
            return []
        ns = self._namespace
        up = GaugeMetricFamily(
            f"{ns}_up", "Whether the last scrape of nsqd succeeded", value=int(state.up)
        )
        if not state.up:
            return [up]
        info = GaugeMetricFamily(
            f"{ns}_info",
            "Version and health of the nsqd node",
            labels=["version", "health"],
        )
        info.add_metric([state.version, state.health], 1)
        return [
            up,
            info,
            GaugeMetricFamily(
                f"{ns}_start_time_seconds",
                "Unix start time of the nsqd node",
                value=state.start_time,
            ),
            GaugeMetricFamily(
                f"{ns}_queue_count",
                "Number of topics of the nsqd node",
                value=state.queue_count,
            ),
        ]
