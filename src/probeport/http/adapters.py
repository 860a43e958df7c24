# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

import json
from collections import deque
from typing import Any

from .client import HttpClient
from .models import HttpRequest, HttpResponse


def json_response(status_code: int, payload: Any) -> HttpResponse:
    """Build an HttpResponse carrying a JSON body."""
    return HttpResponse(
        ok=200 <= status_code < 300,
        status_code=status_code,
        headers={"content-type": "application/json"},
        text=json.dumps(payload),
    )


class StubHttpClient(HttpClient):
    """Deterministic, programmable HttpClient for tests.

    Responses are keyed by ``"METHOD path"``, where path is the URL with the
    scheme and host stripped. Queued responses for a key are served in order;
    the last one repeats.
    """

    def __init__(self, responses: dict[str, list[HttpResponse]] | None = None):
        self._responses: dict[str, deque[HttpResponse]] = {
            key: deque(value) for key, value in (responses or {}).items()
        }
        self.requests: list[HttpRequest] = []
        self.closed = False

    @staticmethod
    def _key(method: str, url: str) -> str:
        path = url.split("://", 1)[-1]
        path = "/" + path.split("/", 1)[1] if "/" in path else "/"
        return f"{method.upper()} {path}"

    def add(self, method: str, path: str, response: HttpResponse) -> None:
        self._responses.setdefault(f"{method.upper()} {path}", deque()).append(response)

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        queue = self._responses.get(self._key(request.method, request.url))
        if not queue:
            return HttpResponse(ok=False, status_code=None, error_message="No stubbed response configured")
        if len(queue) > 1:
            return queue.popleft()
        return queue[0]

    def close(self) -> None:
        self.closed = True
