# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Shared fixtures for testing the NSQ exporter.

This file contains fixtures that are automatically discovered by pytest
and made available to test functions in the same directory and subdirectories.
"""

import copy
from typing import Any

import pytest
from prometheus_client import CollectorRegistry

from nsq_exporter.common.models import Snapshot
from tests.harness.fake_nsqd import FakeNSQD
from tests.harness.nsq_documents import SCENARIO_DOCUMENT, STATS_DOCUMENT


@pytest.fixture
def stats_document() -> dict[str, Any]:
    """A deep copy of the two topic stats document, safe to mutate."""
    return copy.deepcopy(STATS_DOCUMENT)


@pytest.fixture
def scenario_document() -> dict[str, Any]:
    return copy.deepcopy(SCENARIO_DOCUMENT)


@pytest.fixture
def snapshot(stats_document) -> Snapshot:
    return Snapshot.model_validate(stats_document)


@pytest.fixture
def scenario_snapshot(scenario_document) -> Snapshot:
    return Snapshot.model_validate(scenario_document)


@pytest.fixture
def registry() -> CollectorRegistry:
    """A fresh, non-global registry."""
    return CollectorRegistry()


@pytest.fixture
async def fake_nsqd():
    """A FakeNSQD listening on an ephemeral port."""
    nsqd = FakeNSQD()
    await nsqd.start()
    try:
        yield nsqd
    finally:
        await nsqd.stop()
