# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the API client."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ..config import ApiSettings

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    params: dict[str, str | int] | None = None
    body: bytes | str | None = None
    timeout: float | None = None


@dataclass
class HttpResponse:
    """Normalized HTTP response.

    ``ok`` is False both for transport failures (no ``status_code``) and for
    non-2xx statuses.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    text: str = ""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.text) if self.text else None

    @property
    def server_message(self) -> str | None:
        """Best-effort extraction of the API's error message from the body."""
        try:
            payload = self.json()
        except ValueError:
            return self.text.strip() or None
        if isinstance(payload, dict):
            for key in ("message", "error", "detail"):
                value = payload.get(key)
                if isinstance(value, str) and value:
                    return value
                if isinstance(value, dict) and isinstance(value.get("message"), str):
                    return value["message"]
        return None


@dataclass
class RetryConfig:
    """Retry policy for HTTP requests derived from ApiSettings."""

    max_attempts: int = 2
    backoff_factor: float = 2.0
    initial_delay: float = 0.5

    @classmethod
    def from_settings(cls, settings: ApiSettings) -> RetryConfig:
        """Build a retry config from the shared ApiSettings."""
        return cls(
            max_attempts=max(1, settings.max_retries),
            backoff_factor=settings.backoff_factor,
            initial_delay=settings.initial_delay,
        )
