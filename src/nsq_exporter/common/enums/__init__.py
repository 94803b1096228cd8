# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nsq_exporter.common.enums.base_enums import CaseInsensitiveStrEnum
from nsq_exporter.common.enums.collector_enums import (
    CollectorType,
    ScrapeResult,
    TimingGranularity,
)

__all__ = [
    "CaseInsensitiveStrEnum",
    "CollectorType",
    "ScrapeResult",
    "TimingGranularity",
]
