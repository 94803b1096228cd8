# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from nsq_exporter.common.url_utils import normalize_nsqd_url, with_json_format


class TestWithJsonFormat:
    """Tests for forcing the JSON stats format."""

    def test_adds_format(self):
        assert with_json_format("http://h:4151/stats") == "http://h:4151/stats?format=json"

    def test_overrides_text_format(self):
        """Test that an explicit text format is replaced."""
        assert with_json_format("http://h/stats?format=text") == "http://h/stats?format=json"

    def test_keeps_other_parameters(self):
        """Test that unrelated query parameters survive."""
        url = with_json_format("http://h/stats?topic=orders")
        assert url == "http://h/stats?topic=orders&format=json"


class TestNormalizeNsqdUrl:
    """Tests for nsqd URL normalization."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("localhost:4151", "http://localhost:4151/stats?format=json"),
            ("http://localhost:4151", "http://localhost:4151/stats?format=json"),
            ("HTTPS://NSQD:4152/stats", "https://nsqd:4152/stats?format=json"),
            ("  http://nsqd/custom/Path  ", "http://nsqd/custom/Path?format=json"),
        ],
    )
    def test_normalization(self, url, expected):
        """Test scheme defaulting, stats path defaulting and host lowercasing."""
        assert normalize_nsqd_url(url) == expected

    @pytest.mark.parametrize("url", ["ftp://nsqd:4151", "http://", "http:///stats"])
    def test_invalid(self, url):
        with pytest.raises(ValueError):
            normalize_nsqd_url(url)
