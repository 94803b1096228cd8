# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from nsq_exporter.collectors import (
    ConsumerStatsCollector,
    QueueStatsCollector,
    StatsCollectorProtocol,
    SubQueueStatsCollector,
)
from nsq_exporter.common.enums import CollectorType
from nsq_exporter.common.exceptions import CollectorNotFoundError, ConfigurationError
from nsq_exporter.common.factories import StatsCollectorFactory


class TestStatsCollectorFactory:
    """Tests for the collector name to constructor table."""

    def test_all_types_registered(self):
        assert set(StatsCollectorFactory.get_all_class_types()) == set(CollectorType)

    @pytest.mark.parametrize(
        "name,expected_cls",
        [
            (CollectorType.QUEUES, QueueStatsCollector),
            ("sub_queues", SubQueueStatsCollector),
            ("CONSUMERS", ConsumerStatsCollector),
        ],
    )
    def test_create_instance(self, name, expected_cls):
        """Test that names resolve case-insensitively to new collector instances."""
        collector = StatsCollectorFactory.create_instance(name, namespace="test")
        assert isinstance(collector, expected_cls)
        assert isinstance(collector, StatsCollectorProtocol)
        assert collector.namespace == "test"

    def test_instances_are_independent(self):
        first = StatsCollectorFactory.create_instance(CollectorType.QUEUES)
        second = StatsCollectorFactory.create_instance(CollectorType.QUEUES)
        assert first is not second

    def test_unknown_name(self):
        """Test that an unknown name lists the available collectors."""
        with pytest.raises(CollectorNotFoundError) as exc_info:
            StatsCollectorFactory.get_class_from_type("producers")
        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.name == "producers"
        assert "queues" in str(exc_info.value)
