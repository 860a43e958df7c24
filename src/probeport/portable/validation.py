# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pre-flight validation of an import batch.

Runs before any remote call. The first offending record aborts the whole
batch; violations are not aggregated.
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import urlsplit

from ..errors import ValidationError, invalid_value_message
from ..models import CHECK_TYPES, HTTP_METHODS, KEYWORD_CHECK_TYPES, PortableProbeConfig

INTERVAL_RANGE = (30, 3600)
TIMEOUT_SECONDS_RANGE = (1, 60)
MAX_REDIRECTS_RANGE = (0, 20)
SSL_EXPIRY_DAYS_RANGE = (1, 365)


def check_probe_url(raw_url: str) -> str | None:
    """Return a reason when ``raw_url`` is not an absolute http(s) URL with a host."""
    try:
        parts = urlsplit(raw_url)
    except ValueError as exc:
        return f"invalid URL {raw_url!r}: {exc}"
    if not parts.scheme:
        return f"URL must include scheme (http:// or https://): {raw_url!r}"
    if parts.scheme not in {"http", "https"}:
        return f"URL scheme must be http or https, got {parts.scheme!r}"
    if not parts.hostname:
        return f"URL must include a host: {raw_url!r}"
    return None


def _within(value: int, bounds: tuple[int, int]) -> bool:
    return bounds[0] <= value <= bounds[1]


def check_record(record: PortableProbeConfig) -> str | None:
    """Return the first rule ``record`` breaks, or None."""
    if not record.name:
        return "name is required"
    if not record.url:
        return "url is required"
    if not record.check_type:
        return "check_type is required"
    if record.check_type not in CHECK_TYPES:
        return invalid_value_message("check_type", record.check_type, CHECK_TYPES)
    if record.check_type == "http":
        reason = check_probe_url(record.url)
        if reason:
            return reason
    if record.method and record.method.upper() not in HTTP_METHODS:
        return invalid_value_message("method", record.method, HTTP_METHODS)
    if record.interval_seconds and not _within(record.interval_seconds, INTERVAL_RANGE):
        return f"interval_seconds must be between 30 and 3600, got {record.interval_seconds}"
    if record.timeout_ms and not _within(record.timeout_ms // 1000, TIMEOUT_SECONDS_RANGE):
        return f"timeout_ms must be between 1000 and 60000, got {record.timeout_ms}"
    if record.keyword_check and record.keyword_check_type is not None:
        if record.keyword_check_type not in KEYWORD_CHECK_TYPES:
            return invalid_value_message("keyword_check_type", record.keyword_check_type, KEYWORD_CHECK_TYPES)
    if not _within(record.max_redirects, MAX_REDIRECTS_RANGE):
        return f"max_redirects must be between 0 and 20, got {record.max_redirects}"
    if record.ssl_expiry_threshold_days and not _within(record.ssl_expiry_threshold_days, SSL_EXPIRY_DAYS_RANGE):
        return f"ssl_expiry_threshold_days must be between 1 and 365, got {record.ssl_expiry_threshold_days}"
    return None


def validate_configs(records: Sequence[PortableProbeConfig]) -> None:
    """Raise ``ValidationError`` for the first invalid record, in file order."""
    for index, record in enumerate(records):
        reason = check_record(record)
        if reason:
            raise ValidationError(index, record.name, reason)
