# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nsq_exporter.common.models.base_models import NSQBaseModel
from nsq_exporter.common.models.snapshot_models import (
    Consumer,
    LatencyPercentiles,
    Percentile,
    Queue,
    Snapshot,
    SubQueue,
    TransportFlags,
    has_snapshot_keys,
    is_envelope,
)

__all__ = [
    "Consumer",
    "LatencyPercentiles",
    "NSQBaseModel",
    "Percentile",
    "Queue",
    "Snapshot",
    "SubQueue",
    "TransportFlags",
    "has_snapshot_keys",
    "is_envelope",
]
