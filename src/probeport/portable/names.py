# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Existing-name index used for duplicate detection during import."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from ..api.probes import ProbeCollection
from ..errors import TransportError
from ..models import Probe
from ..utils.deadline import Deadline

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


def iter_probes(
    collection: ProbeCollection,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    status: str | None = None,
    labels: Mapping[str, str] | None = None,
    deadline: Deadline | None = None,
) -> Iterator[Probe]:
    """Yield every probe, page by page, until a short page is returned."""
    page = 1
    while True:
        result = collection.list(page, page_size, status=status, labels=labels, deadline=deadline)
        yield from result.probes
        if len(result.probes) < page_size:
            return
        page += 1


def build_name_index(
    collection: ProbeCollection,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    deadline: Deadline | None = None,
) -> set[str]:
    """Snapshot the names of all remote probes.

    Any page failing aborts the build; a partial index is never returned.
    """
    try:
        names = {probe.name for probe in iter_probes(collection, page_size=page_size, deadline=deadline)}
    except TransportError as exc:
        raise exc.wrap("failed to list existing probes") from exc
    logger.info("found %d existing probe name(s)", len(names))
    return names
