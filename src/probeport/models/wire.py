# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Wire models exchanged with the remote probe API."""

from __future__ import annotations

import json
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .portable import ProbeLabel
from .presence import Maybe


@dataclass(frozen=True)
class CreateProbeRequest:
    """Body of ``POST /v1/probes``.

    Fields wrapped in ``Maybe`` are only sent when present, so that an explicit
    ``follow_redirects: false`` is distinguishable from leaving it to the server.
    """

    name: str
    url: str
    check_type: str
    method: str
    timeout_ms: int
    interval_seconds: int
    expected_status_codes: tuple[int, ...]
    regions: tuple[str, ...] = ()
    headers: str = ""
    ssl_check_enabled: bool = False
    ssl_expiry_threshold_days: int = 0
    max_redirects: int = 0
    body: Maybe[str] = field(default_factory=Maybe)
    keyword_check: Maybe[str] = field(default_factory=Maybe)
    keyword_check_type: Maybe[str] = field(default_factory=Maybe)
    json_path_check: Maybe[str] = field(default_factory=Maybe)
    json_path_expected: Maybe[str] = field(default_factory=Maybe)
    follow_redirects: Maybe[bool] = field(default_factory=Maybe)
    alert_channel_ids: Maybe[tuple[uuid.UUID, ...]] = field(default_factory=Maybe)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "url": self.url,
            "check_type": self.check_type,
            "method": self.method,
            "timeout_ms": self.timeout_ms,
            "interval_seconds": self.interval_seconds,
            "expected_status_codes": list(self.expected_status_codes),
            "ssl_check_enabled": self.ssl_check_enabled,
            "ssl_expiry_threshold_days": self.ssl_expiry_threshold_days,
            "max_redirects": self.max_redirects,
        }
        if self.regions:
            payload["regions"] = list(self.regions)
        if self.headers:
            payload["headers"] = self.headers
        for key in ("body", "keyword_check", "keyword_check_type", "json_path_check", "json_path_expected", "follow_redirects"):
            wrapped: Maybe[Any] = getattr(self, key)
            if wrapped.present:
                payload[key] = wrapped.value
        if self.alert_channel_ids.present:
            payload["alert_channel_ids"] = [str(channel_id) for channel_id in self.alert_channel_ids.value or ()]
        return payload


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _parse_uuid(value: Any) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


@dataclass
class Probe:
    """A live probe as returned by the API."""

    id: uuid.UUID | None
    name: str
    url: str = ""
    check_type: str = ""
    method: str = ""
    headers: str = ""
    body: str | None = None
    timeout_ms: int = 0
    interval_seconds: int = 0
    regions: list[str] = field(default_factory=list)
    expected_status_codes: list[int] = field(default_factory=list)
    keyword_check: str | None = None
    keyword_check_type: str | None = None
    json_path_check: str | None = None
    json_path_expected: str | None = None
    ssl_check_enabled: bool = False
    ssl_expiry_threshold_days: int = 0
    follow_redirects: bool = False
    max_redirects: int = 0
    alert_channel_ids: list[uuid.UUID] = field(default_factory=list)
    labels: list[ProbeLabel] = field(default_factory=list)
    status: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Probe:
        """Lenient parse of the API's JSON; unknown keys are ignored."""
        headers = data.get("headers")
        if isinstance(headers, Mapping):
            headers = json.dumps(dict(headers))
        channel_ids = [parsed for parsed in (_parse_uuid(v) for v in data.get("alert_channel_ids") or []) if parsed]
        labels = [
            ProbeLabel(key=str(item.get("key") or ""), value=_opt_str(item.get("value")))
            for item in data.get("labels") or []
            if isinstance(item, Mapping)
        ]
        return cls(
            id=_parse_uuid(data.get("id")) if data.get("id") else None,
            name=str(data.get("name") or ""),
            url=str(data.get("url") or ""),
            check_type=str(data.get("check_type") or ""),
            method=str(data.get("method") or ""),
            headers=str(headers or ""),
            body=_opt_str(data.get("body")),
            timeout_ms=int(data.get("timeout_ms") or 0),
            interval_seconds=int(data.get("interval_seconds") or 0),
            regions=[str(r) for r in data.get("regions") or []],
            expected_status_codes=[int(c) for c in data.get("expected_status_codes") or []],
            keyword_check=_opt_str(data.get("keyword_check")),
            keyword_check_type=_opt_str(data.get("keyword_check_type")),
            json_path_check=_opt_str(data.get("json_path_check")),
            json_path_expected=_opt_str(data.get("json_path_expected")),
            ssl_check_enabled=bool(data.get("ssl_check_enabled")),
            ssl_expiry_threshold_days=int(data.get("ssl_expiry_threshold_days") or 0),
            follow_redirects=bool(data.get("follow_redirects")),
            max_redirects=int(data.get("max_redirects") or 0),
            alert_channel_ids=channel_ids,
            labels=labels,
            status=_opt_str(data.get("status")),
        )


@dataclass
class ProbePage:
    """One page of ``GET /v1/probes``."""

    probes: list[Probe]
    total: int = 0
    page: int = 1
    limit: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ProbePage:
        raw = data.get("probes")
        if raw is None:
            raw = data.get("data") or []
        return cls(
            probes=[Probe.from_mapping(item) for item in raw if isinstance(item, Mapping)],
            total=int(data.get("total") or 0),
            page=int(data.get("page") or 1),
            limit=int(data.get("limit") or 0),
        )
