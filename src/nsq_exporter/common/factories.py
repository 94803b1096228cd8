# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar

from nsq_exporter.common.enums import CollectorType
from nsq_exporter.common.exceptions import CollectorNotFoundError

if TYPE_CHECKING:
    from nsq_exporter.collectors.protocols import StatsCollectorProtocol


class StatsCollectorFactory:
    """Name to constructor lookup table for stats collectors.

    Collector classes register themselves with the decorator; the exporter
    resolves the configured names once at startup, so an unknown name fails
    before the first scrape.

    Example:
        @StatsCollectorFactory.register(CollectorType.QUEUES)
        class QueueStatsCollector(BaseStatsCollector):
            ...

        collector = StatsCollectorFactory.create_instance(
            CollectorType.QUEUES, namespace="nsq"
        )
    """

    _registry: ClassVar[dict[CollectorType, type["StatsCollectorProtocol"]]] = {}

    @classmethod
    def register(
        cls, class_type: CollectorType
    ) -> Callable[[type["StatsCollectorProtocol"]], type["StatsCollectorProtocol"]]:
        """Register a collector class under the given type."""

        def decorator(
            collector_cls: type["StatsCollectorProtocol"],
        ) -> type["StatsCollectorProtocol"]:
            cls._registry[class_type] = collector_cls
            return collector_cls

        return decorator

    @classmethod
    def get_class_from_type(
        cls, class_type: CollectorType | str
    ) -> type["StatsCollectorProtocol"]:
        """Return the class registered under ``class_type``.

        Raises:
            CollectorNotFoundError: If the name is not a registered collector.
        """
        available = sorted(str(t) for t in cls._registry)
        try:
            collector_type = CollectorType(class_type)
        except ValueError:
            raise CollectorNotFoundError(str(class_type), available) from None
        if collector_type not in cls._registry:
            raise CollectorNotFoundError(str(class_type), available)
        return cls._registry[collector_type]

    @classmethod
    def create_instance(
        cls, class_type: CollectorType | str, **kwargs: Any
    ) -> "StatsCollectorProtocol":
        """Create a new collector of the registered type."""
        return cls.get_class_from_type(class_type)(**kwargs)

    @classmethod
    def get_all_class_types(cls) -> list[CollectorType]:
        return list(cls._registry)
