# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""HTTP server exposing the NSQ metrics to Prometheus.

Every request to the metrics path runs one scrape of nsqd, so the exposed
values are as fresh as the request.
"""

from __future__ import annotations

import asyncio
import errno
import html

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST

from nsq_exporter.common.constants import (
    DEFAULT_LISTEN_HOST,
    DEFAULT_LISTEN_PORT,
    DEFAULT_METRICS_PATH,
)
from nsq_exporter.common.mixins import LoggerMixin
from nsq_exporter.executor import NSQExecutor

_LANDING_PAGE = """<html>
<head><title>NSQ Exporter</title></head>
<body>
<h1>NSQ Exporter</h1>
<p><a href="{path}">Metrics</a></p>
</body>
</html>
"""


def render_landing_page(metrics_path: str) -> str:
    """HTML index page linking to the metrics path."""
    return _LANDING_PAGE.format(path=html.escape(metrics_path, quote=True))


class MetricsServer(LoggerMixin):
    """Metrics HTTP server component.

    Routes:
        GET <metrics_path>: one scrape, rendered in the Prometheus text format
        GET /: landing page (only when the metrics path is not ``/``)
        GET /health: liveness probe
    """

    def __init__(
        self,
        executor: NSQExecutor,
        host: str = DEFAULT_LISTEN_HOST,
        port: int = DEFAULT_LISTEN_PORT,
        metrics_path: str = DEFAULT_METRICS_PATH,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._executor = executor
        self._host = host
        self._port = port
        self._metrics_path = metrics_path
        self._runner: web.AppRunner | None = None

    @property
    def port(self) -> int:
        return self._port

    async def _handle_metrics(self, request: web.Request) -> web.Response:
        """Handle GET <metrics_path>."""
        body = await self._executor.scrape_and_render()
        # CONTENT_TYPE_LATEST already carries the charset parameter
        return web.Response(
            body=body, headers={"Content-Type": CONTENT_TYPE_LATEST}
        )

    async def _handle_index(self, request: web.Request) -> web.Response:
        """Handle GET / endpoint."""
        return web.Response(
            text=render_landing_page(self._metrics_path), content_type="text/html"
        )

    async def _handle_health(self, request: web.Request) -> web.Response:
        """Handle GET /health endpoint for liveness probes."""
        return web.Response(text="ok")

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get(self._metrics_path, self._handle_metrics)
        if self._metrics_path != "/":
            app.router.add_get("/", self._handle_index)
        if self._metrics_path != "/health":
            app.router.add_get("/health", self._handle_health)
        return app

    async def start(self) -> None:
        """Start the HTTP server."""
        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._host, self._port)

        try:
            await site.start()
        except OSError as e:
            await self.stop()
            if e.errno == errno.EADDRINUSE:
                raise OSError(
                    f"Port {self._port} is already in use. "
                    f"Use --listen-port to specify a different port."
                ) from None
            raise

        # Resolve the bound port when started on an ephemeral one
        if self._port == 0 and self._runner.addresses:
            self._port = self._runner.addresses[0][1]

        self.info(
            f"Metrics available at http://{self._host}:{self._port}{self._metrics_path}"
        )

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner:
            runner = self._runner
            self._runner = None
            await runner.cleanup()
            self.info("Metrics server stopped")

    async def serve_forever(self) -> None:
        """Start the server and block until cancelled."""
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()
