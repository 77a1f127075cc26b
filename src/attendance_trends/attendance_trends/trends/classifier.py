from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import PCT_MAX, TREND_EPSILON, TREND_PERFECT_TOLERANCE
from ..core.enums import TrendTier
from ..snapshots.model import as_finite_float


@dataclass(frozen=True)
class TrendClassifier:
    """Compare a student's latest percentage with the previous recorded week.

    Two perfect weeks in a row outrank any improvement; otherwise a change of
    more than `epsilon` points either way is an improvement or a decline.
    """

    epsilon: float = TREND_EPSILON
    perfect_tolerance: float = TREND_PERFECT_TOLERANCE

    def classify(self, curr, prev) -> Optional[TrendTier]:
        c = as_finite_float(curr)
        p = as_finite_float(prev)
        if c is None or p is None:
            return None

        if abs(c - PCT_MAX) <= self.perfect_tolerance and abs(p - PCT_MAX) <= self.perfect_tolerance:
            return TrendTier.GOAT
        if c - p > self.epsilon:
            return TrendTier.DIAMOND
        if p - c > self.epsilon:
            return TrendTier.SILVER
        return TrendTier.GOLD


def classify_trend(curr, prev, epsilon: float = TREND_EPSILON) -> Optional[TrendTier]:
    return TrendClassifier(epsilon=epsilon).classify(curr, prev)
