# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Builds the exporter from its configuration and runs it."""

import asyncio
import contextlib
import logging

from prometheus_client import CollectorRegistry

import nsq_exporter.collectors  # noqa: F401  (registers the collectors)
from nsq_exporter.collectors.protocols import StatsCollectorProtocol
from nsq_exporter.common.config import ExporterConfig
from nsq_exporter.common.factories import StatsCollectorFactory
from nsq_exporter.common.logging import setup_rich_logging
from nsq_exporter.executor import NSQExecutor
from nsq_exporter.server import MetricsServer
from nsq_exporter.snapshot import SnapshotFetcher, create_ssl_context

_logger = logging.getLogger(__name__)


def create_collectors(config: ExporterConfig) -> list[StatsCollectorProtocol]:
    """Instantiate the configured stats collectors, failing on unknown names."""
    return [
        StatsCollectorFactory.create_instance(collector_type, namespace=config.namespace)
        for collector_type in config.collectors
    ]


def create_executor(
    config: ExporterConfig,
    fetcher: SnapshotFetcher,
    registry: CollectorRegistry | None = None,
) -> NSQExecutor:
    return NSQExecutor(
        fetcher,
        create_collectors(config),
        namespace=config.namespace,
        registry=registry if registry is not None else CollectorRegistry(),
        concurrent_ingest=config.concurrent_ingest,
        timing_granularity=config.timing_granularity,
    )


def create_fetcher(config: ExporterConfig) -> SnapshotFetcher:
    """Build the nsqd fetcher, with a client TLS context when TLS material is configured."""
    ssl_context = None
    if config.tls_enabled:
        ssl_context = create_ssl_context(
            config.tls_ca_cert, config.tls_cert, config.tls_key
        )
        _logger.info("Using the configured TLS material for nsqd")
    return SnapshotFetcher(
        config.nsqd_url, timeout=config.timeout, ssl_context=ssl_context
    )


async def serve_exporter(config: ExporterConfig) -> None:
    """Serve metrics until cancelled."""
    async with create_fetcher(config) as fetcher:
        executor = create_executor(config, fetcher)
        server = MetricsServer(
            executor,
            host=config.listen_host,
            port=config.listen_port,
            metrics_path=config.metrics_path,
        )
        _logger.info(
            "Scraping %s with collectors: %s",
            fetcher.url,
            ", ".join(str(c) for c in config.collectors),
        )
        await server.serve_forever()


def run_exporter(config: ExporterConfig) -> None:
    """Set up logging and run the exporter in a new event loop."""
    setup_rich_logging(config.log_level, config.log_file)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve_exporter(config))
    _logger.info("NSQ exporter stopped")
