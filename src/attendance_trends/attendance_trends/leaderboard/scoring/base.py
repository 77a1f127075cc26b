from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import TrendTier


class TierScoring(ABC):
    """Scoring interface (Strategy Pattern for leaderboard points)."""

    @abstractmethod
    def points(self, tier: TrendTier) -> int:
        raise NotImplementedError
