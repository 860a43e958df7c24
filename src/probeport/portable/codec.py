# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSON/YAML codec for lists of portable probe configurations."""

from __future__ import annotations

import json
from collections.abc import Iterable

import yaml

from ..errors import FileEmpty, FileUnreadable, ParseFailure
from ..models import PortableProbeConfig
from .formats import Format


def decode(data: bytes, fmt: Format, source: str = "<bytes>") -> list[PortableProbeConfig]:
    """Decode a JSON array / YAML sequence of records.

    Zero-length input is ``FileEmpty``; a well-formed empty list decodes to no
    records and is left for the caller to reject.
    """
    if len(data) == 0:
        raise FileEmpty(source)

    try:
        if fmt == Format.JSON:
            raw = json.loads(data)
        else:
            raw = yaml.safe_load(data)
    except (ValueError, yaml.YAMLError) as exc:
        raise ParseFailure(fmt.value, source, exc) from exc

    if raw is None and fmt == Format.YAML:
        return []
    if not isinstance(raw, list):
        raise ParseFailure(fmt.value, source, f"expected a list of probe configurations, got {type(raw).__name__}")

    records: list[PortableProbeConfig] = []
    for index, item in enumerate(raw):
        try:
            records.append(PortableProbeConfig.from_mapping(item))
        except ValueError as exc:
            raise ParseFailure(fmt.value, source, f"item {index}: {exc}") from exc
    return records


def read_configs(path: str, fmt: Format) -> list[PortableProbeConfig]:
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise FileUnreadable(path, exc.strerror or exc) from exc
    return decode(data, fmt, source=path)


def encode(records: Iterable[PortableProbeConfig], fmt: Format) -> bytes:
    payload = [record.to_mapping() for record in records]
    if fmt == Format.JSON:
        return (json.dumps(payload, indent=2) + "\n").encode("utf-8")
    return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True, default_flow_style=False).encode("utf-8")
