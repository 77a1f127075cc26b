from __future__ import annotations

from ...core.enums import TrendTier
from .base import TierScoring

TIER_POINTS: dict[TrendTier, int] = {
    TrendTier.SILVER: 0,
    TrendTier.GOLD: 1,
    TrendTier.DIAMOND: 2,
    TrendTier.GOAT: 3,
}


class StandardTierScoring(TierScoring):
    """Standard rule: silver=0, gold=1, diamond=2, goat=3."""

    def points(self, tier: TrendTier) -> int:
        return TIER_POINTS[tier]
