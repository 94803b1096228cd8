# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nsq_exporter.common.config.exporter_config import (
    ExporterConfig,
    load_exporter_config,
    parse_collector_names,
)

__all__ = ["ExporterConfig", "load_exporter_config", "parse_collector_names"]
