# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Bulk probe configuration import/export pipeline."""

from .codec import decode, encode, read_configs
from .convert import from_probe, to_create_request
from .exporter import ProbeExporter, parse_label_filters, parse_probe_ids, resolve_status_filter, write_export
from .formats import Format, resolve_format
from .importer import ProbeImporter
from .names import build_name_index, iter_probes
from .preview import render_preview
from .validation import validate_configs

__all__ = [
    "Format",
    "ProbeExporter",
    "ProbeImporter",
    "build_name_index",
    "decode",
    "encode",
    "from_probe",
    "iter_probes",
    "parse_label_filters",
    "parse_probe_ids",
    "read_configs",
    "render_preview",
    "resolve_format",
    "resolve_status_filter",
    "to_create_request",
    "validate_configs",
    "write_export",
]
