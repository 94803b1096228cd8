# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nsq_exporter.executor.nsq_executor import (
    DaemonState,
    NSQExecutor,
    ScrapeOutcome,
)

__all__ = ["DaemonState", "NSQExecutor", "ScrapeOutcome"]
