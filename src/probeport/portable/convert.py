# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Conversions between portable records and wire shapes."""

from __future__ import annotations

import json
import logging
import uuid

from ..models import CreateProbeRequest, Maybe, PortableProbeConfig, Probe

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "GET"
DEFAULT_TIMEOUT_MS = 10000
DEFAULT_INTERVAL_SECONDS = 60
DEFAULT_EXPECTED_STATUS_CODES = (200,)


def encode_headers(headers: dict[str, str] | None) -> str:
    """Headers travel as a JSON string; no headers is ``""``, never ``"{}"``."""
    if not headers:
        return ""
    return json.dumps(headers, separators=(",", ":"))


def parse_channel_ids(raw_ids: tuple[str, ...] | list[str]) -> Maybe[tuple[uuid.UUID, ...]]:
    """Parse channel UUIDs, dropping (and warning about) invalid ones.

    Absent when the input is empty or nothing survives.
    """
    parsed: list[uuid.UUID] = []
    for raw in raw_ids:
        try:
            parsed.append(uuid.UUID(raw))
        except (TypeError, ValueError) as exc:
            logger.warning("skipping invalid channel ID %r: %s", raw, exc)
    if not parsed:
        return Maybe.absent()
    return Maybe.of(tuple(parsed))


def _paired(primary_present: bool, value: str | None) -> Maybe[str]:
    """A companion field is sent only alongside its primary field, and never as null."""
    if primary_present and value is not None:
        return Maybe.of(value)
    return Maybe.absent()


def to_create_request(record: PortableProbeConfig) -> CreateProbeRequest:
    """Map a validated record to a create request, filling defaults."""
    keyword_present = bool(record.keyword_check)
    json_path_present = bool(record.json_path_check)
    return CreateProbeRequest(
        name=record.name,
        url=record.url,
        check_type=record.check_type,
        method=(record.method or DEFAULT_METHOD).upper(),
        timeout_ms=record.timeout_ms or DEFAULT_TIMEOUT_MS,
        interval_seconds=record.interval_seconds or DEFAULT_INTERVAL_SECONDS,
        expected_status_codes=tuple(record.expected_status_codes) or DEFAULT_EXPECTED_STATUS_CODES,
        regions=tuple(record.regions),
        headers=encode_headers(record.headers),
        ssl_check_enabled=record.ssl_check_enabled,
        ssl_expiry_threshold_days=record.ssl_expiry_threshold_days,
        max_redirects=record.max_redirects,
        body=Maybe.of(record.body) if record.body is not None else Maybe.absent(),
        keyword_check=Maybe.of(record.keyword_check) if keyword_present else Maybe.absent(),
        keyword_check_type=_paired(keyword_present, record.keyword_check_type),
        json_path_check=Maybe.of(record.json_path_check) if json_path_present else Maybe.absent(),
        json_path_expected=_paired(json_path_present, record.json_path_expected),
        follow_redirects=Maybe.of(record.follow_redirects),
        alert_channel_ids=parse_channel_ids(record.alert_channel_ids),
    )


def decode_headers(probe: Probe) -> dict[str, str]:
    if not probe.headers or probe.headers == "{}":
        return {}
    try:
        headers = json.loads(probe.headers)
    except ValueError as exc:
        logger.warning("could not parse headers for probe %r: %s", probe.name, exc)
        return {}
    if not isinstance(headers, dict):
        logger.warning("could not parse headers for probe %r: expected an object", probe.name)
        return {}
    return {str(key): str(value) for key, value in headers.items()}


def from_probe(probe: Probe) -> PortableProbeConfig:
    """Convert a live probe back into its portable form."""
    return PortableProbeConfig(
        name=probe.name,
        url=probe.url,
        check_type=probe.check_type,
        method=probe.method,
        headers=decode_headers(probe),
        body=probe.body,
        timeout_ms=probe.timeout_ms,
        interval_seconds=probe.interval_seconds,
        regions=tuple(probe.regions),
        expected_status_codes=tuple(probe.expected_status_codes),
        keyword_check=probe.keyword_check,
        keyword_check_type=probe.keyword_check_type,
        json_path_check=probe.json_path_check,
        json_path_expected=probe.json_path_expected,
        ssl_check_enabled=probe.ssl_check_enabled,
        ssl_expiry_threshold_days=probe.ssl_expiry_threshold_days,
        follow_redirects=probe.follow_redirects,
        max_redirects=probe.max_redirects,
        alert_channel_ids=tuple(str(channel_id) for channel_id in probe.alert_channel_ids),
        labels=tuple(probe.labels),
    )
