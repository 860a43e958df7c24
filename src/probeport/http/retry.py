# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry helper for HttpClient implementations."""

from __future__ import annotations

import logging
import time

from ..config import load_api_settings
from ..errors import categorize_exception
from ..utils.deadline import Deadline
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)


def build_default_retry_config() -> RetryConfig:
    """Create a RetryConfig from environment-backed ApiSettings."""
    return RetryConfig.from_settings(load_api_settings())


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
    deadline: Deadline | None = None,
    retry_on_status: bool = False,
) -> HttpResponse:
    """Execute a request with basic retry/backoff semantics.

    Only transport failures (no status code) are retried. When
    ``retry_on_status`` is set, 429 and 5xx responses are retried as well; it
    must stay off for non-idempotent calls. Every attempt re-checks the run
    deadline and clamps the request timeout to it; an exhausted deadline raises
    ``DeadlineExceeded``.
    """
    cfg = retry_config or build_default_retry_config()
    deadline = deadline or Deadline.unbounded()
    operation = f"{request.method} {request.url}"

    attempt = 0
    delay = cfg.initial_delay
    last_response: HttpResponse | None = None

    while attempt < cfg.max_attempts:
        deadline.check(operation)
        attempt_request = HttpRequest(
            url=request.url,
            method=request.method,
            headers=request.headers,
            params=request.params,
            body=request.body,
            timeout=deadline.clamp(request.timeout),
        )
        try:
            response = client.request(attempt_request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(
                ok=False,
                error_message=str(exc),
                error_type=exc.__class__.__name__,
                meta={"error_category": categorize_exception(exc)},
            )
        last_response = response

        if response.ok:
            if attempt:
                response.meta["retry_count"] = attempt
            return response

        retryable = response.status_code is None or (
            retry_on_status and (response.status_code == 429 or response.status_code >= 500)
        )
        if not retryable:
            if attempt:
                response.meta.setdefault("retry_count", attempt)
            return response

        attempt += 1
        if attempt >= cfg.max_attempts:
            break
        remaining = deadline.remaining()
        if remaining is not None and remaining <= delay:
            # Sleeping would outlive the run; surface the deadline now.
            deadline.check(operation)
            delay_to_sleep = remaining
        else:
            delay_to_sleep = delay
        logger.info("retrying %s after %s (attempt %d/%d)", operation, response.error_message or response.status_code, attempt + 1, cfg.max_attempts)
        time.sleep(delay_to_sleep)
        delay *= cfg.backoff_factor

    deadline.check(operation)
    if last_response is not None:
        last_response.meta.setdefault("retry_count", attempt)
        last_response.meta.setdefault("retry_exhausted", True)
        return last_response

    return HttpResponse(ok=False, error_message="Retry budget exhausted", meta={"retry_count": attempt, "retry_exhausted": True})
