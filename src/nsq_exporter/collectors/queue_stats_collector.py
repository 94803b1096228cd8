# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Iterator

from nsq_exporter.collectors.base_stats_collector import (
    BaseStatsCollector,
    LabelValues,
    MetricField,
    format_bool,
)
from nsq_exporter.common.constants import EXPOSED_PERCENTILES
from nsq_exporter.common.enums import CollectorType
from nsq_exporter.common.factories import StatsCollectorFactory
from nsq_exporter.common.models import Queue, Snapshot

__all__ = ["QUEUE_FIELDS", "QueueStatsCollector"]


QUEUE_FIELDS: tuple[MetricField[Queue], ...] = (
    MetricField("sub_queue_count", lambda q: len(q.sub_queues), "Number of channels of the topic"),
    MetricField("depth", lambda q: q.depth, "Topic depth"),
    MetricField("backend_depth", lambda q: q.backend_depth, "Topic backend (disk) depth"),
    MetricField("message_count", lambda q: q.message_count, "Topic message count"),
    MetricField(
        "latency_p99",
        lambda q: q.latency_percentiles.value_at(EXPOSED_PERCENTILES["p99"]),
        "99th percentile of the topic end-to-end processing latency (ns)",
    ),
    MetricField(
        "latency_p95",
        lambda q: q.latency_percentiles.value_at(EXPOSED_PERCENTILES["p95"]),
        "95th percentile of the topic end-to-end processing latency (ns)",
    ),
)  # fmt: skip


@StatsCollectorFactory.register(CollectorType.QUEUES)
class QueueStatsCollector(BaseStatsCollector[Queue]):
    """Exposes one gauge per field for every topic of the nsqd node."""

    collector_type = CollectorType.QUEUES
    ENTITY = "queue"
    LABEL_NAMES = ("queue", "paused")
    FIELDS = QUEUE_FIELDS

    def _iter_entities(self, snapshot: Snapshot) -> Iterator[tuple[LabelValues, Queue]]:
        for queue in snapshot.queues:
            yield (queue.name, format_bool(queue.paused)), queue
