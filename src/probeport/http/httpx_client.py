# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import ApiSettings, load_api_settings
from ..errors import categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper.

    Transport exceptions never escape ``request``; they come back as
    ``HttpResponse(ok=False)`` with the exception's class name in ``error_type``.
    """

    def __init__(self, settings: ApiSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_api_settings()
        self._client = client or httpx.Client(
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        logger.debug("%s %s params=%s", request.method, request.url, request.params)
        try:
            resp = self._client.request(
                request.method,
                request.url,
                headers=headers,
                params=request.params,
                content=request.body,
                timeout=timeout,
            )
        except Exception as exc:  # noqa: BLE001
            logger.debug("%s %s failed: %s", request.method, request.url, exc)
            return HttpResponse(
                ok=False,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                meta={"error_category": categorize_exception(exc)},
            )

        logger.debug("%s %s -> %s", request.method, request.url, resp.status_code)
        return HttpResponse(
            ok=resp.is_success,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            text=resp.text,
            url=str(resp.url),
        )

    def close(self) -> None:
        self._client.close()
