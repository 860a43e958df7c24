# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe import: decode, validate, de-duplicate and create, one record at a time."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from ..api.probes import ProbeCollection
from ..errors import ClientNotConfigured, NoConfigurationsFound, TransportError
from ..models import ImportOutcome, PortableProbeConfig
from ..utils.deadline import Deadline
from .codec import read_configs
from .convert import to_create_request
from .formats import resolve_format
from .names import DEFAULT_PAGE_SIZE, build_name_index
from .preview import print_preview
from .validation import validate_configs

logger = logging.getLogger(__name__)


class ProbeImporter:
    """
    Drives a single import run.

    The collection is injected so the pipeline runs without any global client;
    dry runs never touch it and may pass None. Records are processed strictly
    in file order and every create happens after the previous one returns,
    which keeps the in-memory name index consistent without locking.
    """

    def __init__(
        self,
        collection: ProbeCollection | None = None,
        *,
        deadline: Deadline | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        stream: TextIO | None = None,
    ):
        self.collection = collection
        self.deadline = deadline or Deadline.unbounded()
        self.page_size = page_size
        self.stream = stream if stream is not None else sys.stderr

    def load(self, path: str, fmt: str | None = None) -> list[PortableProbeConfig]:
        """Resolve the format, decode the file and validate the whole batch."""
        resolved = resolve_format(path, fmt)
        records = read_configs(path, resolved)
        if not records:
            raise NoConfigurationsFound(path)
        validate_configs(records)
        return records

    def run(self, path: str, fmt: str | None = None, *, dry_run: bool = False) -> ImportOutcome | None:
        """Import ``path``; returns None for a dry run, else the outcome."""
        records = self.load(path, fmt)
        if dry_run:
            print_preview(records, self.stream)
            return None
        return self.apply(records)

    def apply(self, records: Sequence[PortableProbeConfig]) -> ImportOutcome:
        """Create every record whose name is not taken yet.

        Per-record create failures are collected and the loop moves on; a
        deadline or interrupt propagates and the partial outcome is dropped.
        """
        if self.collection is None:
            raise ClientNotConfigured()

        existing = build_name_index(self.collection, page_size=self.page_size, deadline=self.deadline)
        outcome = ImportOutcome(total=len(records))

        for record in records:
            if record.name in existing:
                outcome.record_skipped(record.name)
                self._echo(f'Skipped "{record.name}": probe with this name already exists')
                continue

            request = to_create_request(record)
            try:
                probe = self.collection.create(request, deadline=self.deadline)
            except TransportError as exc:
                outcome.record_failed(record.name, exc)
                self._echo(f'Failed "{record.name}": {exc}')
                continue

            created_name = probe.name or record.name
            outcome.record_created(created_name)
            # Later records in this batch must collide with the one just created.
            existing.add(created_name)
            existing.add(record.name)

        logger.info(
            "import finished: %d created, %d skipped, %d failed of %d",
            len(outcome.created),
            len(outcome.skipped),
            len(outcome.failed),
            outcome.total,
        )
        return outcome

    def _echo(self, message: str) -> None:
        self.stream.write(message + "\n")
        self.stream.flush()
