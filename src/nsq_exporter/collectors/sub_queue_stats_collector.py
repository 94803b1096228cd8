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
from nsq_exporter.common.models import Snapshot, SubQueue

__all__ = ["SUB_QUEUE_FIELDS", "SubQueueStatsCollector"]


SUB_QUEUE_FIELDS: tuple[MetricField[SubQueue], ...] = (
    MetricField("consumer_count", lambda c: len(c.consumers), "Number of clients connected to the channel"),
    MetricField("depth", lambda c: c.depth, "Channel depth"),
    MetricField("backend_depth", lambda c: c.backend_depth, "Channel backend (disk) depth"),
    MetricField("message_count", lambda c: c.message_count, "Channel message count"),
    MetricField("in_flight_count", lambda c: c.in_flight_count, "Messages in flight on the channel"),
    MetricField("deferred_count", lambda c: c.deferred_count, "Deferred messages of the channel"),
    MetricField("requeue_count", lambda c: c.requeue_count, "Requeued messages of the channel"),
    MetricField("timeout_count", lambda c: c.timeout_count, "Timed out messages of the channel"),
    MetricField(
        "latency_p99",
        lambda c: c.latency_percentiles.value_at(EXPOSED_PERCENTILES["p99"]),
        "99th percentile of the channel end-to-end processing latency (ns)",
    ),
    MetricField(
        "latency_p95",
        lambda c: c.latency_percentiles.value_at(EXPOSED_PERCENTILES["p95"]),
        "95th percentile of the channel end-to-end processing latency (ns)",
    ),
)  # fmt: skip


@StatsCollectorFactory.register(CollectorType.SUB_QUEUES)
class SubQueueStatsCollector(BaseStatsCollector[SubQueue]):
    """Exposes one gauge per field for every channel of every topic."""

    collector_type = CollectorType.SUB_QUEUES
    ENTITY = "sub_queue"
    LABEL_NAMES = ("queue", "sub_queue", "paused")
    FIELDS = SUB_QUEUE_FIELDS

    def _iter_entities(
        self, snapshot: Snapshot
    ) -> Iterator[tuple[LabelValues, SubQueue]]:
        for queue in snapshot.queues:
            for sub_queue in queue.sub_queues:
                labels = (queue.name, sub_queue.name, format_bool(sub_queue.paused))
                yield labels, sub_queue
