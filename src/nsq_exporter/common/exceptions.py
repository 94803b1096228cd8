# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0


class NSQExporterError(Exception):
    """Base class for all exceptions raised by the NSQ exporter."""

    def __str__(self) -> str:
        """Return the string representation of the exception with the class name."""
        return super().__str__()


class TransportError(NSQExporterError):
    """Exception raised when the nsqd stats endpoint cannot be reached in time."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch stats from {url}: {reason}")


class DecodeError(NSQExporterError):
    """Exception raised when the stats document is not valid JSON or does not match the snapshot shape."""


class ConfigurationError(NSQExporterError):
    """Exception raised when the exporter configuration is invalid."""


class CollectorNotFoundError(ConfigurationError):
    """Exception raised when no stats collector is registered under a name."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f"Unknown stats collector: {name!r} (available: {', '.join(available)})"
        )
