# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nsq_exporter.server.metrics_server import MetricsServer, render_landing_page

__all__ = ["MetricsServer", "render_landing_page"]
