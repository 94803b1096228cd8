# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nsq_exporter.collectors.base_stats_collector import (
    BaseStatsCollector,
    LabelValues,
    MappedValue,
    MetricField,
    format_bool,
)
from nsq_exporter.collectors.consumer_stats_collector import (
    CONSUMER_FIELDS,
    ConsumerStatsCollector,
)
from nsq_exporter.collectors.protocols import MetricSink, StatsCollectorProtocol
from nsq_exporter.collectors.queue_stats_collector import (
    QUEUE_FIELDS,
    QueueStatsCollector,
)
from nsq_exporter.collectors.sub_queue_stats_collector import (
    SUB_QUEUE_FIELDS,
    SubQueueStatsCollector,
)

__all__ = [
    "BaseStatsCollector",
    "CONSUMER_FIELDS",
    "ConsumerStatsCollector",
    "LabelValues",
    "MappedValue",
    "MetricField",
    "MetricSink",
    "QUEUE_FIELDS",
    "QueueStatsCollector",
    "StatsCollectorProtocol",
    "SUB_QUEUE_FIELDS",
    "SubQueueStatsCollector",
    "format_bool",
]
