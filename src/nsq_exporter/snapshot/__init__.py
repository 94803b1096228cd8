# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nsq_exporter.snapshot.snapshot_fetcher import (
    SnapshotFetcher,
    create_ssl_context,
    parse_snapshot,
)

__all__ = ["SnapshotFetcher", "create_ssl_context", "parse_snapshot"]
