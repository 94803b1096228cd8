# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Typed representation of the nsqd ``/stats?format=json`` document.

See https://github.com/nsqio/nsq/blob/master/nsqd/stats.go for the source of
the wire names. Topics, channels and clients are modelled as
:class:`Queue`, :class:`SubQueue` and :class:`Consumer`.

Scalar fields are lenient: a missing, ``null`` or non-numeric value degrades
to zero (or ``False``/``""``) instead of failing the whole snapshot, because
nsqd omits fields depending on its version and on sample volume. Structural
mismatches (an entity that is not an object, a list that is not a list) still
fail validation.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import AliasChoices, BeforeValidator, Field, model_validator

from nsq_exporter.common.models.base_models import NSQBaseModel

_logger = logging.getLogger(__name__)

# Keys that identify an object as a snapshot rather than an envelope
_SNAPSHOT_KEYS = frozenset({"topics", "version", "health", "start_time"})


def _lenient_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        _logger.debug("Degrading non-numeric value %r to 0", value)
        return 0


def _lenient_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        _logger.debug("Degrading non-numeric value %r to 0.0", value)
        return 0.0


def _lenient_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    if isinstance(value, int | float):
        return value != 0
    _logger.debug("Degrading non-boolean value %r to False", value)
    return False


def _lenient_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _null_as_empty_list(value: Any) -> Any:
    return [] if value is None else value


Count = Annotated[int, BeforeValidator(_lenient_int)]
Number = Annotated[float, BeforeValidator(_lenient_float)]
Flag = Annotated[bool, BeforeValidator(_lenient_bool)]
Label = Annotated[str, BeforeValidator(_lenient_str)]


class Percentile(NSQBaseModel):
    """A single latency percentile reported by nsqd."""

    quantile: Number = Field(description="Percentile rank in the range 0-1 (e.g. 0.99)")
    value: Number = Field(
        default=0.0, description="End-to-end processing latency in nanoseconds"
    )


class LatencyPercentiles(NSQBaseModel):
    """End-to-end processing latency percentiles of a topic or channel.

    Lookups go through :meth:`value_at` by rank, never by list position,
    since nsqd omits ranks when the sample volume is low.
    """

    count: Count = Field(default=0, description="Number of samples in the window")
    percentiles: Annotated[
        list[Percentile], BeforeValidator(_null_as_empty_list)
    ] = Field(default_factory=list, description="Ordered percentile entries")

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        """Accept ``null``, a bare percentile list, and drop unusable entries."""
        if data is None:
            return {}
        if isinstance(data, list):
            data = {"percentiles": data}
        elif not isinstance(data, dict):
            _logger.debug("Degrading malformed latency data %r to empty", data)
            return {}
        if isinstance(data.get("percentiles"), list):
            entries = [
                entry
                for entry in data["percentiles"]
                if isinstance(entry, dict) and entry.get("quantile") is not None
            ]
            if len(entries) != len(data["percentiles"]):
                _logger.debug("Dropping malformed latency percentile entries")
            data = {**data, "percentiles": entries}
        return data

    def value_at(self, rank: float) -> float:
        """Return the latency at the given rank, or 0.0 when nsqd did not report it."""
        for percentile in self.percentiles:
            if abs(percentile.quantile - rank) < 1e-9:
                return percentile.value
        return 0.0


class TransportFlags(NSQBaseModel):
    """Negotiated transport features of a client connection."""

    deflate: Flag = False
    snappy: Flag = False
    tls: Flag = False


class Consumer(NSQBaseModel):
    """A client connected to a channel.

    Client ids are not unique: several connections of one process share an id,
    so consumers are identified by their full attribute tuple.
    """

    id: Label = Field(default="", validation_alias=AliasChoices("client_id", "id"))
    hostname: Label = ""
    version: Label = ""
    remote_address: Label = ""
    state: Count = Field(default=0, description="Opaque nsqd connection state code")
    ready_count: Count = 0
    in_flight_count: Count = 0
    message_count: Count = 0
    finish_count: Count = 0
    requeue_count: Count = 0
    connect_time: Count = Field(
        default=0,
        validation_alias=AliasChoices("connect_ts", "connect_time"),
        description="Unix timestamp of the connection in seconds",
    )
    sample_rate: Count = 0
    transport_flags: TransportFlags = Field(default_factory=TransportFlags)
    user_agent: Label = ""

    @model_validator(mode="before")
    @classmethod
    def _lift_transport_flags(cls, data: Any) -> Any:
        """Move nsqd's flat ``deflate``/``snappy``/``tls`` keys into ``transport_flags``."""
        if isinstance(data, dict) and "transport_flags" not in data:
            flags = {key: data.get(key) for key in ("deflate", "snappy", "tls")}
            data = {**data, "transport_flags": flags}
        return data


class SubQueue(NSQBaseModel):
    """A channel of a topic."""

    name: Label = Field(
        default="", validation_alias=AliasChoices("channel_name", "name")
    )
    depth: Count = 0
    backend_depth: Count = 0
    message_count: Count = 0
    in_flight_count: Count = 0
    deferred_count: Count = 0
    requeue_count: Count = 0
    timeout_count: Count = 0
    paused: Flag = False
    latency_percentiles: LatencyPercentiles = Field(
        default_factory=LatencyPercentiles,
        validation_alias=AliasChoices("e2e_processing_latency", "latency_percentiles"),
    )
    consumers: Annotated[list[Consumer], BeforeValidator(_null_as_empty_list)] = Field(
        default_factory=list, validation_alias=AliasChoices("clients", "consumers")
    )


class Queue(NSQBaseModel):
    """A topic of the nsqd node."""

    name: Label = Field(default="", validation_alias=AliasChoices("topic_name", "name"))
    depth: Count = 0
    backend_depth: Count = 0
    message_count: Count = 0
    paused: Flag = False
    latency_percentiles: LatencyPercentiles = Field(
        default_factory=LatencyPercentiles,
        validation_alias=AliasChoices("e2e_processing_latency", "latency_percentiles"),
    )
    sub_queues: Annotated[list[SubQueue], BeforeValidator(_null_as_empty_list)] = Field(
        default_factory=list, validation_alias=AliasChoices("channels", "sub_queues")
    )


class Snapshot(NSQBaseModel):
    """One point-in-time status document of an nsqd node.

    Validates both the bare document and the legacy envelope
    ``{"status_code": 200, "status_text": "OK", "data": {...}}`` returned by
    nsqd releases before 1.0 to the same model.
    """

    version: Label = ""
    health: Label = ""
    start_time: Count = Field(default=0, description="Unix start time of nsqd in seconds")
    queues: Annotated[list[Queue], BeforeValidator(_null_as_empty_list)] = Field(
        default_factory=list, validation_alias=AliasChoices("topics", "queues")
    )

    @model_validator(mode="before")
    @classmethod
    def _unwrap_envelope(cls, data: Any) -> Any:
        if not is_envelope(data):
            return data
        status_code = data.get("status_code")
        if status_code is not None and _lenient_int(status_code) != 200:
            raise ValueError(
                f"nsqd returned status {status_code}: {data.get('status_text', '')}"
            )
        inner = data["data"]
        if not isinstance(inner, dict):
            raise ValueError(f"nsqd envelope carries no stats document: {inner!r}")
        return inner

    @property
    def sub_queue_count(self) -> int:
        """Total number of channels across all topics."""
        return sum(len(queue.sub_queues) for queue in self.queues)

    @property
    def consumer_count(self) -> int:
        """Total number of clients across all channels."""
        return sum(
            len(sub_queue.consumers)
            for queue in self.queues
            for sub_queue in queue.sub_queues
        )


def is_envelope(data: Any) -> bool:
    """Return True if ``data`` is a response envelope wrapping a snapshot in ``data``.

    An object with both ``status_code`` and ``data`` is an envelope whatever
    ``data`` holds, so error envelopes (``"data": null``) are recognized too.
    """
    if not isinstance(data, dict) or "topics" in data:
        return False
    if "status_code" in data and "data" in data:
        return True
    inner = data.get("data")
    return isinstance(inner, dict) and has_snapshot_keys(inner)


def has_snapshot_keys(data: Any) -> bool:
    """Return True if ``data`` is an object carrying at least one stats document key."""
    return isinstance(data, dict) and bool(_SNAPSHOT_KEYS & data.keys())
