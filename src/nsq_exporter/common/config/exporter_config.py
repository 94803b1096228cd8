# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exporter configuration with environment variable and CLI support."""

import logging
import re
from pathlib import Path
from typing import Annotated, Any, Literal

from cyclopts import Parameter
from pydantic import (
    BeforeValidator,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from typing_extensions import Self

from nsq_exporter.common.constants import (
    DEFAULT_COLLECTORS,
    DEFAULT_LISTEN_HOST,
    DEFAULT_LISTEN_PORT,
    DEFAULT_METRICS_PATH,
    DEFAULT_NAMESPACE,
    DEFAULT_NSQD_URL,
    DEFAULT_TIMEOUT,
    LEGACY_COLLECTOR_ALIASES,
    LEGACY_COLLECTOR_PREFIX,
)
from nsq_exporter.common.enums import CollectorType, TimingGranularity
from nsq_exporter.common.exceptions import ConfigurationError
from nsq_exporter.common.url_utils import normalize_nsqd_url

_logger = logging.getLogger(__name__)

_NAMESPACE_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def parse_collector_names(value: Any) -> list[CollectorType]:
    """Parse collector names from a comma separated string or a list.

    Accepts the current names (``queues``, ``sub_queues``, ``consumers``) as well
    as the original ``stats.topics,stats.channels,stats.clients`` form.
    Duplicates are dropped, order is kept.

    Raises:
        ValueError: If any name is not a known collector.
    """
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list | tuple | set):
        raise ValueError(f"Invalid collector list: {value!r}")

    collectors: list[CollectorType] = []
    for raw_name in value:
        name = str(raw_name).strip().lower()
        if not name:
            continue
        name = name.removeprefix(LEGACY_COLLECTOR_PREFIX)
        name = LEGACY_COLLECTOR_ALIASES.get(name, name)
        try:
            collector_type = CollectorType(name)
        except ValueError:
            valid = ", ".join(str(t) for t in CollectorType)
            raise ValueError(
                f"Unknown stats collector: {raw_name!r} (valid: {valid})"
            ) from None
        if collector_type not in collectors:
            collectors.append(collector_type)

    if not collectors:
        raise ValueError("At least one stats collector must be enabled")
    return collectors


class ExporterConfig(BaseSettings):
    """Exporter configuration with environment variable support.

    Every option can be given on the command line or as an ``NSQ_EXPORTER_``
    prefixed environment variable (e.g. ``NSQ_EXPORTER_NSQD_URL``).
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_prefix="NSQ_EXPORTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def apply_flags(self) -> Self:
        if self.verbose:
            self.log_level = "DEBUG"
        return self

    @model_validator(mode="after")
    def validate_tls_material(self) -> Self:
        """Client certificate and key must be given together, and all files must exist."""
        if (self.tls_cert is None) != (self.tls_key is None):
            raise ValueError("--tls-cert and --tls-key must be provided together")
        for path in (self.tls_ca_cert, self.tls_cert, self.tls_key):
            if path is not None and not path.is_file():
                raise ValueError(f"TLS file does not exist: {path}")
        return self

    @field_validator("nsqd_url")
    @classmethod
    def _normalize_url(cls, value: str) -> str:
        return normalize_nsqd_url(value)

    @field_validator("namespace")
    @classmethod
    def _validate_namespace(cls, value: str) -> str:
        if not _NAMESPACE_RE.match(value):
            raise ValueError(f"Invalid metric namespace: {value!r}")
        return value

    @field_validator("metrics_path")
    @classmethod
    def _validate_metrics_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"Metrics path must start with '/': {value!r}")
        return value

    nsqd_url: Annotated[
        str,
        Field(description="Address of the nsqd stats endpoint"),
        Parameter(name=("--nsqd-url", "--nsqd.addr")),
    ] = DEFAULT_NSQD_URL

    namespace: Annotated[
        str,
        Field(description="Namespace (metric name prefix) for the NSQ metrics"),
        Parameter(name="--namespace"),
    ] = DEFAULT_NAMESPACE

    collectors: Annotated[
        list[CollectorType],
        NoDecode,
        BeforeValidator(parse_collector_names),
        Field(description="Comma separated list of stats collectors to enable"),
        Parameter(name=("--collectors", "--collect")),
    ] = Field(default_factory=lambda: [CollectorType(c) for c in DEFAULT_COLLECTORS])

    timeout: Annotated[
        float,
        Field(description="Timeout of a single stats request (seconds)", gt=0.0),
        Parameter(name="--timeout"),
    ] = DEFAULT_TIMEOUT

    listen_host: Annotated[
        str,
        Field(description="Host to expose metrics on"),
        Parameter(name="--listen-host"),
    ] = DEFAULT_LISTEN_HOST

    listen_port: Annotated[
        int,
        Field(description="Port to expose metrics on", ge=1, le=65535),
        Parameter(name=("--listen-port", "-p")),
    ] = DEFAULT_LISTEN_PORT

    metrics_path: Annotated[
        str,
        Field(description="Path under which to expose metrics"),
        Parameter(name=("--metrics-path", "--web.path")),
    ] = DEFAULT_METRICS_PATH

    tls_ca_cert: Annotated[
        Path | None,
        Field(description="CA certificate file used to verify nsqd"),
        Parameter(name=("--tls-ca-cert", "--tls.ca_cert")),
    ] = None

    tls_cert: Annotated[
        Path | None,
        Field(description="Client certificate file for TLS connections to nsqd"),
        Parameter(name=("--tls-cert", "--tls.cert")),
    ] = None

    tls_key: Annotated[
        Path | None,
        Field(description="Client key file for TLS connections to nsqd"),
        Parameter(name=("--tls-key", "--tls.key")),
    ] = None

    concurrent_ingest: Annotated[
        bool,
        Field(description="Ingest each snapshot into the collectors concurrently"),
        Parameter(name="--concurrent-ingest", negative="--no-concurrent-ingest"),
    ] = True

    timing_granularity: Annotated[
        TimingGranularity,
        Field(description="Observe scrape duration per scrape or per collector"),
        Parameter(name="--timing-granularity"),
    ] = TimingGranularity.SCRAPE

    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Field(description="Logging level"),
        Parameter(name="--log-level"),
    ] = "INFO"

    log_file: Annotated[
        Path | None,
        Field(description="Optional file to write logs to"),
        Parameter(name="--log-file"),
    ] = None

    verbose: Annotated[
        bool,
        Field(description="Verbose mode (sets log level to DEBUG)"),
        Parameter(name=("--verbose", "-v")),
    ] = False

    @property
    def tls_enabled(self) -> bool:
        return any(
            path is not None for path in (self.tls_ca_cert, self.tls_cert, self.tls_key)
        )


def load_exporter_config(**overrides: Any) -> ExporterConfig:
    """Build an ExporterConfig from the environment plus explicit overrides.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    try:
        config = ExporterConfig(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid exporter configuration: {e}") from e
    _logger.debug("Loaded exporter configuration: %s", config.model_dump_json())
    return config
