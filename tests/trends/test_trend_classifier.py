from __future__ import annotations

import pytest

from src.attendance_trends.attendance_trends.core.enums import TrendTier
from src.attendance_trends.attendance_trends.trends.classifier import TrendClassifier, classify_trend


@pytest.mark.parametrize(
    "curr,prev,expected",
    [
        (100, 100, TrendTier.GOAT),
        (100.0, 99.9999999, TrendTier.GOAT),
        (100, 95, TrendTier.DIAMOND),
        (80, 79.8, TrendTier.DIAMOND),
        (80, 79.95, TrendTier.GOLD),
        (80, 80.05, TrendTier.GOLD),
        (75, 75, TrendTier.GOLD),
        (100, 99.95, TrendTier.GOLD),
        (70, 75, TrendTier.SILVER),
        (99.95, 100, TrendTier.GOLD),
    ],
)
def test_classify(curr, prev, expected):
    assert classify_trend(curr, prev) == expected


@pytest.mark.parametrize("curr,prev", [(80, None), (None, 80), ("abc", 80), (float("nan"), 80), (80, float("inf"))])
def test_missing_or_non_finite_values_get_no_tier(curr, prev):
    assert classify_trend(curr, prev) is None


def test_numeric_strings_are_accepted():
    assert classify_trend("90", "85") == TrendTier.DIAMOND


def test_custom_epsilon():
    classifier = TrendClassifier(epsilon=1.0)
    assert classifier.classify(80, 79.5) == TrendTier.GOLD
    assert classifier.classify(80, 78.5) == TrendTier.DIAMOND
