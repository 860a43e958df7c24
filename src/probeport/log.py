# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for probeport."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

DEFAULT_LOG_LEVEL = os.getenv("PROBEPORT_LOG_LEVEL", "WARNING").upper()

_VERBOSITY_LEVELS = {0: None, 1: "INFO", 2: "DEBUG"}


def level_for_verbosity(verbosity: int) -> str | None:
    """Map a repeated -v count to a level name (None keeps the default)."""
    if verbosity <= 0:
        return None
    return _VERBOSITY_LEVELS.get(verbosity, "DEBUG")


def setup_logging(level: str | None = None, *, stream: TextIO | None = None) -> None:
    """Configure standard logging for CLI/library use; the handler writes to stderr."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=stream or sys.stderr,
    )


__all__ = ["level_for_verbosity", "setup_logging"]
