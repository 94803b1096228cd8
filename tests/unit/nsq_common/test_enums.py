# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from nsq_exporter.common.enums import CollectorType, ScrapeResult, TimingGranularity


class TestCaseInsensitiveStrEnum:
    """Tests for case-insensitive enum lookup and comparison."""

    @pytest.mark.parametrize("value", ["queues", "QUEUES", "Queues"])
    def test_lookup(self, value):
        assert CollectorType(value) is CollectorType.QUEUES

    def test_equals_plain_string(self):
        assert ScrapeResult.SUCCESS == "SUCCESS"
        assert str(ScrapeResult.ERROR) == "error"

    def test_usable_as_dict_key(self):
        assert {CollectorType.SUB_QUEUES: 1}["sub_queues"] == 1
        assert {"queues": 1}[CollectorType.QUEUES] == 1

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            TimingGranularity("request")
