# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Base class for stats collectors that turn one entity class of a snapshot into gauges.

A collector is a metric mapper plus the labeled-value table it fills:

- the mapper is a fixed label schema (``LABEL_NAMES``) and a table of
  ``MetricField(name, extractor, help)`` entries (``FIELDS``),
- the table maps every field to ``{label values: gauge value}`` and lives for
  the whole process, but is cleared by :meth:`BaseStatsCollector.reset` on
  every scrape.

Every field of an entity class shares one label tuple, so label values are
built once per entity and reused for all of its fields.
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import ClassVar, Generic, NamedTuple, TypeVar

from prometheus_client.core import GaugeMetricFamily

from nsq_exporter.collectors.protocols import MetricSink
from nsq_exporter.common.constants import DEFAULT_NAMESPACE
from nsq_exporter.common.enums import CollectorType
from nsq_exporter.common.mixins import LoggerMixin
from nsq_exporter.common.models import Snapshot

__all__ = [
    "BaseStatsCollector",
    "LabelValues",
    "MappedValue",
    "MetricField",
    "format_bool",
]

# Entity type handled by a collector (Queue, SubQueue or Consumer)
EntityT = TypeVar("EntityT")

# Ordered label values, positionally matching a collector's LABEL_NAMES
LabelValues = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class MetricField(Generic[EntityT]):
    """One exposed gauge of an entity class."""

    name: str
    extractor: Callable[[EntityT], float]
    help: str


class MappedValue(NamedTuple):
    """A single (label-set, field, value) produced by mapping a snapshot."""

    labels: LabelValues
    field: str
    value: float


def format_bool(value: bool) -> str:
    """Render a boolean as a Prometheus label value."""
    return "true" if value else "false"


class BaseStatsCollector(LoggerMixin, ABC, Generic[EntityT]):
    """Abstract base class for stats collectors.

    Subclasses must implement:
    - _iter_entities(): Walk the snapshot sub-tree once, yielding each live
      entity together with its label values

    ClassVars to override:
        collector_type: Name under which the collector is registered
        ENTITY: Entity name used in metric family names (``<namespace>_<ENTITY>_<field>``)
        LABEL_NAMES: Label schema shared by every field
        FIELDS: The exposed gauges

    Args:
        namespace: Metric name prefix (default: ``nsq``)
    """

    collector_type: ClassVar[CollectorType]
    ENTITY: ClassVar[str]
    LABEL_NAMES: ClassVar[tuple[str, ...]]
    FIELDS: ClassVar[tuple[MetricField, ...]]

    def __init__(self, namespace: str = DEFAULT_NAMESPACE, **kwargs) -> None:
        super().__init__(**kwargs)
        self._namespace = namespace
        self._lock = threading.Lock()
        self._table: dict[str, dict[LabelValues, float]] = {
            field.name: {} for field in self.FIELDS
        }

    @property
    def namespace(self) -> str:
        return self._namespace

    def metric_name(self, field: MetricField) -> str:
        """Full metric family name of a field."""
        return f"{self._namespace}_{self.ENTITY}_{field.name}"

    @abstractmethod
    def _iter_entities(
        self, snapshot: Snapshot
    ) -> Iterator[tuple[LabelValues, EntityT]]:
        """Yield ``(label values, entity)`` for every live entity of this class."""
        pass

    def _extract(self, field: MetricField, entity: EntityT) -> float:
        """Apply a field extractor, degrading any failure to 0.0."""
        try:
            return float(field.extractor(entity))
        except (AttributeError, TypeError, ValueError, OverflowError) as e:
            self.debug(
                lambda: f"Degrading {self.ENTITY} field '{field.name}' to 0: {e!r}"
            )
            return 0.0

    def map_snapshot(self, snapshot: Snapshot) -> Iterator[MappedValue]:
        """Map a snapshot to (label-set, field, value) tuples without touching the table."""
        for labels, entity in self._iter_entities(snapshot):
            for field in self.FIELDS:
                yield MappedValue(labels, field.name, self._extract(field, entity))

    def reset(self) -> None:
        """Clear the table so entities gone from the daemon stop being exposed."""
        with self._lock:
            for values in self._table.values():
                values.clear()

    def ingest(self, snapshot: Snapshot) -> None:
        """Write one entry per field for every live entity of the snapshot.

        Ingest is additive; identical label-sets collapse (last value wins).
        """
        with self._lock:
            for labels, field_name, value in self.map_snapshot(snapshot):
                self._table[field_name][labels] = value
        self.debug(
            lambda: f"{self.__class__.__name__} ingested {self.series_count()} series"
        )

    def emit(self, sink: MetricSink) -> None:
        """Send one gauge family per field, holding every current label-set.

        Emit does not modify the table and can be repeated after one ingest.
        """
        with self._lock:
            for field in self.FIELDS:
                family = self._new_family(field)
                for labels, value in self._table[field.name].items():
                    family.add_metric(list(labels), value)
                sink(family)

    def describe(self, sink: MetricSink) -> None:
        """Send the gauge families of this collector without samples."""
        for field in self.FIELDS:
            sink(self._new_family(field))

    def series_count(self) -> int:
        """Number of label-sets currently held (identical across fields)."""
        with self._lock:
            return len(self._table[self.FIELDS[0].name])

    def _new_family(self, field: MetricField) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            self.metric_name(field), field.help, labels=list(self.LABEL_NAMES)
        )
