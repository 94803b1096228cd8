# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

DEFAULT_NSQD_URL = "http://localhost:4151/stats"
DEFAULT_NAMESPACE = "nsq"
DEFAULT_TIMEOUT = 5.0
DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_LISTEN_PORT = 9117
DEFAULT_METRICS_PATH = "/metrics"
DEFAULT_COLLECTORS = ("queues", "sub_queues")

STATS_PATH = "/stats"
JSON_FORMAT_QUERY = {"format": "json"}

# Percentile ranks exposed as latency gauges, keyed by field suffix
EXPOSED_PERCENTILES = {
    "p99": 0.99,
    "p95": 0.95,
}

# Names accepted from the original `-collect stats.<name>` flag
LEGACY_COLLECTOR_ALIASES = {
    "topics": "queues",
    "channels": "sub_queues",
    "clients": "consumers",
}
LEGACY_COLLECTOR_PREFIX = "stats."
