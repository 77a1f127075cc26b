from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import RosterEntry


class RosterRepository(Protocol):
    def get(self, external_id: str) -> Optional[RosterEntry]:
        raise NotImplementedError

    def student_counts(self) -> dict[str, int]:
        """Number of roster students per roll-class."""

        raise NotImplementedError

    def upsert_many(self, entries: Sequence[RosterEntry]) -> int:
        raise NotImplementedError
