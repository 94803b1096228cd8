# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import asyncio
from typing import Any

import orjson
from aiohttp import web
from aiohttp.test_utils import TestServer

from tests.harness.nsq_documents import STATS_DOCUMENT


class FakeNSQD:
    """Stand-in for the nsqd ``/stats`` endpoint on a real aiohttp server.

    The served document, status code and hang behavior can be changed
    between requests. A hanging request is held until :meth:`stop`.
    """

    def __init__(self) -> None:
        self.body: bytes = orjson.dumps(STATS_DOCUMENT)
        self.status: int = 200
        self.hang: bool = False
        self.requests: list[web.Request] = []
        self._release = asyncio.Event()
        self._server: TestServer | None = None

    def serve(self, document: Any, status: int = 200) -> None:
        """Serve ``document`` (a JSON-able object or raw bytes) from now on."""
        self.body = document if isinstance(document, bytes) else orjson.dumps(document)
        self.status = status

    async def handle_stats(self, request: web.Request) -> web.Response:
        self.requests.append(request)
        if self.hang:
            await self._release.wait()
        return web.Response(
            body=self.body, status=self.status, content_type="application/json"
        )

    @property
    def url(self) -> str:
        assert self._server is not None, "FakeNSQD not started"
        return str(self._server.make_url("/stats"))

    async def start(self) -> None:
        app = web.Application()
        app.router.add_get("/stats", self.handle_stats)
        self._server = TestServer(app)
        await self._server.start_server()

    async def stop(self) -> None:
        self._release.set()
        if self._server is not None:
            await self._server.close()
            self._server = None
