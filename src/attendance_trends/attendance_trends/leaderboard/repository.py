from __future__ import annotations

from typing import Optional, Protocol

from .model import TermLeaderboard


class LeaderboardRepository(Protocol):
    def get(self, *, year: int, term: int) -> Optional[TermLeaderboard]:
        raise NotImplementedError

    def replace(self, board: TermLeaderboard) -> None:
        """Overwrite the term's leaderboard document; never merges."""

        raise NotImplementedError
