# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dry-run preview of an import batch."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TextIO

from ..models import PortableProbeConfig
from .convert import DEFAULT_INTERVAL_SECONDS, DEFAULT_METHOD


def render_preview(records: Sequence[PortableProbeConfig]) -> str:
    lines = [f"Dry run: {len(records)} probe(s) would be imported:", ""]
    for position, record in enumerate(records, start=1):
        method = (record.method or DEFAULT_METHOD).upper()
        interval = record.interval_seconds or DEFAULT_INTERVAL_SECONDS
        lines.append(f"  {position}. {record.name}")
        lines.append(f"     URL: {record.url}")
        lines.append(f"     Type: {record.check_type} | Method: {method} | Interval: {interval}s")
        if record.regions:
            lines.append(f"     Regions: {', '.join(record.regions)}")
        if record.labels:
            lines.append(f"     Labels: {', '.join(label.render() for label in record.labels)}")
        lines.append("")
    lines.append("No probes were created (dry run).")
    return "\n".join(lines) + "\n"


def print_preview(records: Sequence[PortableProbeConfig], stream: TextIO) -> None:
    stream.write(render_preview(records))
