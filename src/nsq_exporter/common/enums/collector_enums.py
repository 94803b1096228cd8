# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nsq_exporter.common.enums.base_enums import CaseInsensitiveStrEnum


class CollectorType(CaseInsensitiveStrEnum):
    """Stats collector implementation type, one per entity class of the nsqd snapshot."""

    QUEUES = "queues"
    """Exposes per-topic gauges."""

    SUB_QUEUES = "sub_queues"
    """Exposes per-channel gauges."""

    CONSUMERS = "consumers"
    """Exposes per-client gauges."""


class ScrapeResult(CaseInsensitiveStrEnum):
    """Outcome of a single scrape, used as the `result` label of the scrape duration summary."""

    SUCCESS = "success"
    ERROR = "error"


class TimingGranularity(CaseInsensitiveStrEnum):
    """How the scrape duration summary is observed."""

    SCRAPE = "scrape"
    """One observation per scrape, labeled by result only."""

    COLLECTOR = "collector"
    """One observation per registered collector, labeled by result and collector name."""
