# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Remote probe collection: the API surface the import/export pipeline consumes."""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable, Mapping
from typing import Any, Protocol, TypeVar

from ..config import ApiSettings, load_api_settings
from ..errors import ClientNotConfigured, ErrorCategory, TransportError, categorize_error_type, categorize_status
from ..http.client import HttpClient, create_default_http_client
from ..http.models import HttpRequest, HttpResponse, RetryConfig
from ..http.retry import send_with_retries
from ..models import CreateProbeRequest, Probe, ProbePage
from ..utils.deadline import Deadline

logger = logging.getLogger(__name__)

PROBES_PATH = "/v1/probes"

T = TypeVar("T")


class ProbeCollection(Protocol):
    """Probe operations needed by import and export."""

    def list(
        self,
        page: int,
        limit: int,
        *,
        status: str | None = None,
        labels: Mapping[str, str] | None = None,
        deadline: Deadline | None = None,
    ) -> ProbePage: ...

    def create(self, request: CreateProbeRequest, *, deadline: Deadline | None = None) -> Probe: ...

    def get(self, probe_id: uuid.UUID, *, deadline: Deadline | None = None) -> Probe: ...


def format_label_filters(labels: Mapping[str, str]) -> str:
    """Render label filters as ``key=value,key`` (key-only matches any value)."""
    return ",".join(f"{key}={value}" if value else key for key, value in labels.items())


class HttpProbeCollection(ProbeCollection):
    """ProbeCollection backed by the JSON API over an HttpClient."""

    def __init__(self, http_client: HttpClient, settings: ApiSettings):
        if not settings.is_configured:
            raise ClientNotConfigured()
        self.http_client = http_client
        self.settings = settings
        self._read_retry = RetryConfig.from_settings(settings)
        # Creates are sent exactly once.
        self._write_retry = RetryConfig(max_attempts=1)

    @classmethod
    def from_settings(cls, settings: ApiSettings | None = None) -> HttpProbeCollection:
        settings = settings or load_api_settings()
        if not settings.is_configured:
            raise ClientNotConfigured()
        return cls(create_default_http_client(settings), settings)

    def _headers(self, *, has_body: bool = False) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "X-API-Key": self.settings.api_key or "",
            "User-Agent": self.settings.user_agent,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.settings.api_url}{path}"

    def _send(
        self,
        request: HttpRequest,
        operation: str,
        *,
        deadline: Deadline | None,
        retry_config: RetryConfig,
        retry_on_status: bool,
    ) -> Any:
        response = send_with_retries(
            self.http_client,
            request,
            retry_config=retry_config,
            deadline=deadline,
            retry_on_status=retry_on_status,
        )
        if not response.ok:
            raise self._error(response, operation)
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"{operation}: invalid JSON response: {exc}", status_code=response.status_code, operation=operation) from exc

    @staticmethod
    def _parse(data: Any, parse: Callable[[Mapping[str, Any]], T], operation: str) -> T:
        """Build a model from a response body; a ``{"data": {...}}`` envelope is unwrapped."""
        if not isinstance(data, Mapping):
            raise TransportError(f"{operation}: unexpected response shape", operation=operation)
        if isinstance(data.get("data"), Mapping):
            data = data["data"]
        try:
            return parse(data)
        except (TypeError, ValueError) as exc:
            raise TransportError(f"{operation}: malformed response: {exc}", operation=operation) from exc

    @staticmethod
    def _error(response: HttpResponse, operation: str) -> TransportError:
        if response.status_code is None:
            category = response.meta.get("error_category")
            return TransportError(
                f"{operation}: {response.error_message or 'request failed'}",
                category=category if isinstance(category, ErrorCategory) else categorize_error_type(response.error_type),
                operation=operation,
            )
        detail = response.server_message
        message = f"{operation}: HTTP {response.status_code}"
        if detail:
            message = f"{message}: {detail}"
        return TransportError(
            message,
            status_code=response.status_code,
            category=categorize_status(response.status_code),
            operation=operation,
        )

    def list(
        self,
        page: int,
        limit: int,
        *,
        status: str | None = None,
        labels: Mapping[str, str] | None = None,
        deadline: Deadline | None = None,
    ) -> ProbePage:
        params: dict[str, str | int] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        if labels:
            params["labels"] = format_label_filters(labels)
        request = HttpRequest(
            url=self._url(PROBES_PATH),
            headers=self._headers(),
            params=params,
            timeout=self.settings.timeout,
        )
        data = self._send(request, "list probes", deadline=deadline, retry_config=self._read_retry, retry_on_status=True)
        return self._parse(data, ProbePage.from_mapping, "list probes")

    def create(self, request: CreateProbeRequest, *, deadline: Deadline | None = None) -> Probe:
        http_request = HttpRequest(
            url=self._url(PROBES_PATH),
            method="POST",
            headers=self._headers(has_body=True),
            body=json.dumps(request.to_payload()),
            timeout=self.settings.timeout,
        )
        data = self._send(http_request, "create probe", deadline=deadline, retry_config=self._write_retry, retry_on_status=False)
        probe = self._parse(data, Probe.from_mapping, "create probe")
        logger.info("created probe %r (%s)", probe.name, probe.id)
        return probe

    def get(self, probe_id: uuid.UUID, *, deadline: Deadline | None = None) -> Probe:
        operation = f"get probe {probe_id}"
        request = HttpRequest(
            url=self._url(f"{PROBES_PATH}/{probe_id}"),
            headers=self._headers(),
            timeout=self.settings.timeout,
        )
        data = self._send(request, operation, deadline=deadline, retry_config=self._read_retry, retry_on_status=True)
        return self._parse(data, Probe.from_mapping, operation)

    def close(self) -> None:
        close = getattr(self.http_client, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> HttpProbeCollection:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
