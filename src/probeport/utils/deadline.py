# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Run-wide deadline.

A single Deadline bounds an entire import or export run. It is created once by
the caller and handed to every remote call; it is never renewed per item.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from ..errors import DeadlineExceeded


class Deadline:
    def __init__(self, seconds: float | None, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires_at = clock() + seconds if seconds is not None and seconds > 0 else None

    @classmethod
    def unbounded(cls) -> Deadline:
        return cls(None)

    @property
    def bounded(self) -> bool:
        return self._expires_at is not None

    def remaining(self) -> float | None:
        """Seconds left, or None when the run has no time limit."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self, operation: str | None = None) -> None:
        if self.expired():
            raise DeadlineExceeded(operation)

    def clamp(self, timeout: float | None) -> float | None:
        """Shorten a per-request timeout so it never outlives the run."""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        if timeout is None:
            return remaining
        return min(timeout, remaining)
