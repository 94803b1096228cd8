# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from nsq_exporter.common.constants import JSON_FORMAT_QUERY, STATS_PATH


def with_json_format(url: str) -> str:
    """Return ``url`` with ``format=json`` set in its query, keeping other parameters."""
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query.update(JSON_FORMAT_QUERY)
    return urlunsplit(parts._replace(query=urlencode(query)))


def normalize_nsqd_url(url: str) -> str:
    """Normalize a user supplied nsqd address into a stats URL.

    - ``http://`` is assumed when no scheme is given
    - ``/stats`` is used when the path is empty
    - ``format=json`` is always requested

    Raises:
        ValueError: If the scheme is not http(s) or the host is missing.

    Example:
        >>> normalize_nsqd_url("localhost:4151")
        'http://localhost:4151/stats?format=json'
    """
    url = url.strip()
    if "://" not in url:
        url = f"http://{url}"

    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in ("http", "https"):
        raise ValueError(f"Unsupported nsqd URL scheme: {parts.scheme!r}")
    if not parts.hostname:
        raise ValueError(f"nsqd URL has no host: {url!r}")

    path = parts.path or STATS_PATH
    return with_json_format(
        urlunsplit((scheme, parts.netloc.lower(), path, parts.query, ""))
    )
