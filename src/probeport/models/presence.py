# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tagged presence for wire fields where "not sent" differs from a falsy value."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Maybe(Generic[T]):
    """Either a present value (possibly ``False``/``""``/``None``) or absent."""

    present: bool = False
    value: T | None = None

    @classmethod
    def of(cls, value: T) -> Maybe[T]:
        return cls(present=True, value=value)

    @classmethod
    def absent(cls) -> Maybe[T]:
        return cls()

    def get(self, default: T | None = None) -> T | None:
        return self.value if self.present else default


ABSENT: Maybe = Maybe()
