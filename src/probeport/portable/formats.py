# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""File format resolution for import/export."""

from __future__ import annotations

import os
from enum import Enum

from ..errors import FormatUndetectable, InvalidFormatFlag


class Format(str, Enum):
    YAML = "yaml"
    JSON = "json"


VALID_FORMATS = tuple(fmt.value for fmt in Format)

_EXTENSIONS = {
    ".yaml": Format.YAML,
    ".yml": Format.YAML,
    ".json": Format.JSON,
}


def parse_format_flag(value: str) -> Format:
    """Validate an explicit ``--format`` value (case-insensitive)."""
    try:
        return Format(value.strip().lower())
    except ValueError:
        raise InvalidFormatFlag(value, VALID_FORMATS) from None


def resolve_format(path: str, explicit: str | None = None) -> Format:
    """Pick the format from the flag when given, else from the file extension."""
    if explicit:
        return parse_format_flag(explicit)
    extension = os.path.splitext(path)[1].lower()
    try:
        return _EXTENSIONS[extension]
    except KeyError:
        raise FormatUndetectable(extension) from None
