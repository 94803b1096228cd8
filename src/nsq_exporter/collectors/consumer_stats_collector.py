# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Iterator

from nsq_exporter.collectors.base_stats_collector import (
    BaseStatsCollector,
    LabelValues,
    MetricField,
    format_bool,
)
from nsq_exporter.common.enums import CollectorType
from nsq_exporter.common.factories import StatsCollectorFactory
from nsq_exporter.common.models import Consumer, Snapshot

__all__ = ["CONSUMER_FIELDS", "ConsumerStatsCollector"]


CONSUMER_FIELDS: tuple[MetricField[Consumer], ...] = (
    # Raw nsqd state code; mapping it to a name is left to dashboards
    MetricField("state", lambda c: c.state, "Connection state code of the client"),
    MetricField("finish_count", lambda c: c.finish_count, "Messages finished by the client"),
    MetricField("message_count", lambda c: c.message_count, "Messages delivered to the client"),
    MetricField("ready_count", lambda c: c.ready_count, "Ready count (RDY) of the client"),
    MetricField("in_flight_count", lambda c: c.in_flight_count, "Messages in flight to the client"),
    MetricField("requeue_count", lambda c: c.requeue_count, "Messages requeued by the client"),
    MetricField("connect_ts", lambda c: c.connect_time, "Unix timestamp the client connected at"),
    MetricField("sample_rate", lambda c: c.sample_rate, "Sample rate of the client"),
)  # fmt: skip


@StatsCollectorFactory.register(CollectorType.CONSUMERS)
class ConsumerStatsCollector(BaseStatsCollector[Consumer]):
    """Exposes one gauge per field for every client of every channel.

    Several connections may share a client id, so the label set carries the
    full identifying attribute tuple of the connection.
    """

    collector_type = CollectorType.CONSUMERS
    ENTITY = "consumer"
    LABEL_NAMES = (
        "queue",
        "sub_queue",
        "deflate",
        "snappy",
        "tls",
        "client_id",
        "hostname",
        "version",
        "remote_address",
    )
    FIELDS = CONSUMER_FIELDS

    def _iter_entities(
        self, snapshot: Snapshot
    ) -> Iterator[tuple[LabelValues, Consumer]]:
        for queue in snapshot.queues:
            for sub_queue in queue.sub_queues:
                for consumer in sub_queue.consumers:
                    flags = consumer.transport_flags
                    labels = (
                        queue.name,
                        sub_queue.name,
                        format_bool(flags.deflate),
                        format_bool(flags.snappy),
                        format_bool(flags.tls),
                        consumer.id,
                        consumer.hostname,
                        consumer.version,
                        consumer.remote_address,
                    )
                    yield labels, consumer
