# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Portable probe configuration: the file-representable form of a probe.

The portable form is independent of the wire request shape so that an export
from one environment can be imported into another. Keys are lower_snake_case.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

CHECK_TYPES = ("http", "ping", "tcp", "dns_resolve")
HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")
KEYWORD_CHECK_TYPES = ("contains", "not_contains")

_STR_FIELDS = ("name", "url", "check_type", "method")
_OPTIONAL_STR_FIELDS = ("body", "keyword_check", "keyword_check_type", "json_path_check", "json_path_expected")
_INT_FIELDS = ("timeout_ms", "interval_seconds", "ssl_expiry_threshold_days", "max_redirects")
_BOOL_FIELDS = ("ssl_check_enabled", "follow_redirects")


def _expect_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _expect_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer, got {type(value).__name__}")
    return value


def _expect_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean, got {type(value).__name__}")
    return value


def _expect_list(key: str, value: Any) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class ProbeLabel:
    key: str
    value: str | None = None

    @classmethod
    def from_mapping(cls, data: Any) -> ProbeLabel:
        if not isinstance(data, Mapping):
            raise ValueError(f"label must be a mapping, got {type(data).__name__}")
        key = data.get("key")
        value = data.get("value")
        return cls(
            key=_expect_str("labels.key", key) if key is not None else "",
            value=_expect_str("labels.value", value) if value is not None else None,
        )

    def to_mapping(self) -> dict[str, Any]:
        out: dict[str, Any] = {"key": self.key}
        if self.value is not None:
            out["value"] = self.value
        return out

    def render(self) -> str:
        return f"{self.key}={self.value}" if self.value is not None else self.key


@dataclass(frozen=True)
class PortableProbeConfig:
    """One probe as it appears in an import/export file.

    Zero means "unset" for ``timeout_ms``, ``interval_seconds`` and
    ``ssl_expiry_threshold_days``; ``max_redirects`` zero is an explicit value.
    Records are treated as immutable once decoded.
    """

    name: str = ""
    url: str = ""
    check_type: str = ""
    method: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    timeout_ms: int = 0
    interval_seconds: int = 0
    regions: tuple[str, ...] = ()
    expected_status_codes: tuple[int, ...] = ()
    keyword_check: str | None = None
    keyword_check_type: str | None = None
    json_path_check: str | None = None
    json_path_expected: str | None = None
    ssl_check_enabled: bool = False
    ssl_expiry_threshold_days: int = 0
    follow_redirects: bool = False
    max_redirects: int = 0
    alert_channel_ids: tuple[str, ...] = ()
    labels: tuple[ProbeLabel, ...] = ()

    @classmethod
    def from_mapping(cls, data: Any) -> PortableProbeConfig:
        """Build a record from decoded JSON/YAML; ``null`` values count as missing.

        Raises ``ValueError`` when the shape is wrong.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a mapping, got {type(data).__name__}")

        kwargs: dict[str, Any] = {}
        for key in _STR_FIELDS + _OPTIONAL_STR_FIELDS:
            if data.get(key) is not None:
                kwargs[key] = _expect_str(key, data[key])
        for key in _INT_FIELDS:
            if data.get(key) is not None:
                kwargs[key] = _expect_int(key, data[key])
        for key in _BOOL_FIELDS:
            if data.get(key) is not None:
                kwargs[key] = _expect_bool(key, data[key])

        headers = data.get("headers")
        if headers is not None:
            if not isinstance(headers, Mapping):
                raise ValueError(f"field 'headers' must be a mapping, got {type(headers).__name__}")
            kwargs["headers"] = {str(k): _expect_str(f"headers.{k}", v) for k, v in headers.items()}

        if data.get("regions") is not None:
            kwargs["regions"] = tuple(_expect_str("regions", r) for r in _expect_list("regions", data["regions"]))
        if data.get("expected_status_codes") is not None:
            kwargs["expected_status_codes"] = tuple(
                _expect_int("expected_status_codes", c) for c in _expect_list("expected_status_codes", data["expected_status_codes"])
            )
        if data.get("alert_channel_ids") is not None:
            kwargs["alert_channel_ids"] = tuple(
                _expect_str("alert_channel_ids", c) for c in _expect_list("alert_channel_ids", data["alert_channel_ids"])
            )
        if data.get("labels") is not None:
            kwargs["labels"] = tuple(ProbeLabel.from_mapping(item) for item in _expect_list("labels", data["labels"]))

        return cls(**kwargs)

    def to_mapping(self) -> dict[str, Any]:
        """Serialize in a stable key order; unset optional fields are omitted."""
        out: dict[str, Any] = {
            "name": self.name,
            "url": self.url,
            "check_type": self.check_type,
            "method": self.method,
        }
        if self.headers:
            out["headers"] = dict(self.headers)
        if self.body is not None:
            out["body"] = self.body
        out["timeout_ms"] = self.timeout_ms
        out["interval_seconds"] = self.interval_seconds
        if self.regions:
            out["regions"] = list(self.regions)
        out["expected_status_codes"] = list(self.expected_status_codes)
        for key in _OPTIONAL_STR_FIELDS[1:]:
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        out["ssl_check_enabled"] = self.ssl_check_enabled
        out["ssl_expiry_threshold_days"] = self.ssl_expiry_threshold_days
        out["follow_redirects"] = self.follow_redirects
        out["max_redirects"] = self.max_redirects
        if self.alert_channel_ids:
            out["alert_channel_ids"] = list(self.alert_channel_ids)
        if self.labels:
            out["labels"] = [label.to_mapping() for label in self.labels]
        return out
