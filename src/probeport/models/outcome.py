# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Import outcome accumulator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ImportOutcome:
    """What a non-dry-run import did, record by record.

    Entries are only ever appended; nothing is rolled back.
    """

    total: int = 0
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def record_created(self, name: str) -> None:
        self.created.append(name)

    def record_skipped(self, name: str) -> None:
        self.skipped.append(name)

    def record_failed(self, name: str, error: object) -> None:
        self.failed.append(name)
        self.errors.append(f"{name}: {error}")

    @property
    def processed(self) -> int:
        return len(self.created) + len(self.skipped) + len(self.failed)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "created": list(self.created),
            "skipped": list(self.skipped),
            "failed": list(self.failed),
            "total": self.total,
        }
        if self.errors:
            out["errors"] = list(self.errors)
        return out
