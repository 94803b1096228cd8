# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Fetches and decodes the nsqd stats document.

One :meth:`SnapshotFetcher.fetch` is one HTTP GET with a bounded total
timeout and no retry; retrying is left to the next Prometheus scrape.
"""

import asyncio
import ssl
import time
from pathlib import Path
from typing import Any

import aiohttp
import orjson
from pydantic import ValidationError
from typing_extensions import Self

from nsq_exporter.common.constants import DEFAULT_TIMEOUT
from nsq_exporter.common.exceptions import (
    ConfigurationError,
    DecodeError,
    TransportError,
)
from nsq_exporter.common.mixins import LoggerMixin
from nsq_exporter.common.models import Snapshot, has_snapshot_keys, is_envelope
from nsq_exporter.common.url_utils import with_json_format

__all__ = ["SnapshotFetcher", "create_ssl_context", "parse_snapshot"]

_REQUEST_HEADERS = {"Accept": "application/json"}


def parse_snapshot(payload: bytes | str) -> Snapshot:
    """Decode a stats response body into a Snapshot.

    Both the bare document and the ``{status_code, status_text, data}``
    envelope are accepted.

    Raises:
        DecodeError: If the body is not JSON or does not match the snapshot shape.
    """
    try:
        document: Any = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"Stats response is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise DecodeError(
            f"Stats response must be a JSON object, got {type(document).__name__}"
        )
    # Wrong endpoint, e.g. {"message": "NOT_FOUND"}
    if not is_envelope(document) and not has_snapshot_keys(document):
        raise DecodeError(
            f"Stats response is not an nsqd stats document: keys {sorted(document)}"
        )

    try:
        return Snapshot.model_validate(document)
    except ValidationError as e:
        raise DecodeError(
            f"Stats response does not match the snapshot shape: {e}"
        ) from e


def create_ssl_context(
    ca_cert: Path | None = None,
    cert: Path | None = None,
    key: Path | None = None,
) -> ssl.SSLContext | None:
    """Build the client TLS context for nsqd connections.

    Returns None when no TLS material is configured, so aiohttp applies its
    default verification for https URLs.

    Raises:
        ConfigurationError: If a certificate or key cannot be loaded.
    """
    if ca_cert is None and cert is None and key is None:
        return None
    try:
        context = ssl.create_default_context(
            cafile=str(ca_cert) if ca_cert is not None else None
        )
        if cert is not None and key is not None:
            context.load_cert_chain(certfile=str(cert), keyfile=str(key))
    except (ssl.SSLError, OSError) as e:
        raise ConfigurationError(f"Failed to load TLS material: {e}") from e
    return context


class SnapshotFetcher(LoggerMixin):
    """Async HTTP client for the nsqd ``/stats`` endpoint.

    The fetcher owns one aiohttp session for its lifetime so connections are
    pooled by the connector across scrapes; every response is released on
    success and failure alike.

    Args:
        url: Stats URL of the nsqd node (``format=json`` is added when missing)
        timeout: Total timeout of one request in seconds
        ssl_context: Optional client TLS context for https nsqd endpoints

    Example:
        async with SnapshotFetcher("http://localhost:4151/stats", timeout=2.0) as fetcher:
            snapshot = await fetcher.fetch()
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        ssl_context: ssl.SSLContext | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._url = with_json_format(url)
        self._timeout = timeout
        self._ssl_context = ssl_context
        self._session: aiohttp.ClientSession | None = None

    @property
    def url(self) -> str:
        """The stats URL being fetched."""
        return self._url

    @property
    def timeout(self) -> float:
        return self._timeout

    async def initialize(self) -> None:
        """Create the aiohttp client session."""
        if self._session is not None:
            return
        connector = aiohttp.TCPConnector(ssl=self._ssl_context or True)
        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self._timeout),
            headers=_REQUEST_HEADERS,
        )

    async def close(self) -> None:
        """Close the aiohttp client session."""
        if self._session:
            session = self._session
            self._session = None
            await session.close()

    async def __aenter__(self) -> Self:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def fetch(self) -> Snapshot:
        """Fetch one snapshot from nsqd.

        Returns:
            The decoded Snapshot.

        Raises:
            RuntimeError: If the HTTP session is not initialized
            TransportError: On connection failure, timeout or a non-2xx status
            DecodeError: On malformed JSON or an unexpected document shape
        """
        # Snapshot session to avoid race with close() setting it to None
        session = self._session
        if session is None or session.closed:
            raise RuntimeError("HTTP session not initialized. Call initialize() first.")

        start = time.perf_counter()
        try:
            async with session.get(self._url) as response:
                response.raise_for_status()
                body = await response.read()
        except aiohttp.ClientResponseError as e:
            raise TransportError(self._url, f"HTTP {e.status} {e.message}") from e
        except asyncio.TimeoutError as e:
            raise TransportError(
                self._url, f"timed out after {self._timeout:g}s"
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(self._url, repr(e)) from e

        self.debug(
            lambda: f"Fetched {len(body)} bytes from {self._url} in {time.perf_counter() - start:.3f}s"
        )
        return parse_snapshot(body)
