# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe export: fetch live probes and write them in the portable format."""

from __future__ import annotations

import logging
import os
import re
import uuid
from collections.abc import Mapping, Sequence

from ..api.probes import ProbeCollection
from ..errors import ConfigurationError, FileUnwritable, NoProbesFound, TransportError, invalid_value_message
from ..models import PortableProbeConfig, Probe
from ..utils.deadline import Deadline
from .codec import encode
from .convert import from_probe
from .formats import Format
from .names import DEFAULT_PAGE_SIZE, iter_probes

logger = logging.getLogger(__name__)

PROBE_STATUSES = ("up", "down", "degraded", "paused", "pending")
LABEL_KEY_MAX_LENGTH = 63
_LABEL_KEY_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


def resolve_status_filter(value: str | None) -> str | None:
    if not value:
        return None
    if value not in PROBE_STATUSES:
        raise ConfigurationError(invalid_value_message("--status", value, PROBE_STATUSES))
    return value


def _check_label_key(key: str) -> None:
    if len(key) > LABEL_KEY_MAX_LENGTH:
        raise ConfigurationError(f"label key must be at most {LABEL_KEY_MAX_LENGTH} characters (got {len(key)})")
    if not _LABEL_KEY_RE.match(key):
        raise ConfigurationError(
            f"invalid key format: {key!r} (must be lowercase alphanumeric with hyphens, "
            "starting and ending with alphanumeric)"
        )


def parse_label_filters(raw: str | None) -> dict[str, str]:
    """Parse ``key=value,key`` filters; a bare key matches any value."""
    filters: dict[str, str] = {}
    if not raw:
        return filters
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition("=")
        if sep and key:
            _check_label_key(key)
            filters[key] = value
        else:
            _check_label_key(part)
            filters[part] = ""
    return filters


def parse_probe_ids(raw: str | None) -> list[uuid.UUID]:
    if not raw:
        return []
    ids: list[uuid.UUID] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(uuid.UUID(part))
        except ValueError as exc:
            raise ConfigurationError(f"invalid probe ID {part!r}: {exc}") from exc
    if not ids:
        raise ConfigurationError("--probe-ids provided but no valid IDs found")
    return ids


class ProbeExporter:
    """Reads probes from a collection and renders them as a portable file."""

    def __init__(
        self,
        collection: ProbeCollection,
        *,
        deadline: Deadline | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.collection = collection
        self.deadline = deadline or Deadline.unbounded()
        self.page_size = page_size

    def fetch(
        self,
        *,
        probe_ids: Sequence[uuid.UUID] | None = None,
        status: str | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> list[Probe]:
        if probe_ids:
            probes = []
            for probe_id in probe_ids:
                try:
                    probes.append(self.collection.get(probe_id, deadline=self.deadline))
                except TransportError as exc:
                    raise exc.wrap(f"failed to get probe {probe_id}") from exc
            return probes
        try:
            return list(
                iter_probes(
                    self.collection,
                    page_size=self.page_size,
                    status=status,
                    labels=labels,
                    deadline=self.deadline,
                )
            )
        except TransportError as exc:
            raise exc.wrap("failed to list probes") from exc

    def collect(
        self,
        *,
        probe_ids: Sequence[uuid.UUID] | None = None,
        status: str | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> list[PortableProbeConfig]:
        probes = self.fetch(probe_ids=probe_ids, status=status, labels=labels)
        if not probes:
            raise NoProbesFound()
        return [from_probe(probe) for probe in probes]

    def export(
        self,
        fmt: Format,
        *,
        probe_ids: Sequence[uuid.UUID] | None = None,
        status: str | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> tuple[bytes, int]:
        """Return the encoded document and the number of probes in it."""
        records = self.collect(probe_ids=probe_ids, status=status, labels=labels)
        return encode(records, fmt), len(records)


def write_export(data: bytes, path: str) -> None:
    """Write an export file readable only by the owner."""
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise FileUnwritable(path, exc.strerror or exc) from exc
    logger.debug("wrote %d bytes to %s", len(data), path)
