from __future__ import annotations

from src.attendance_trends.attendance_trends.core.enums import TrendTier
from src.attendance_trends.attendance_trends.leaderboard.model import TermLeaderboard
from src.attendance_trends.attendance_trends.leaderboard.scoring.standard_scoring import StandardTierScoring
from src.attendance_trends.attendance_trends.leaderboard.service import aggregate_leaderboard
from src.attendance_trends.attendance_trends.snapshots.model import SnapshotRow


def row(ext, roll_class, trend):
    return SnapshotRow(key=ext, external_id=ext, roll_class=roll_class, pct_present=90.0, trend=trend)


def build(weeks, counts=None, excluded=("staff",)):
    return aggregate_leaderboard(year=2025, term=3, weeks=weeks, student_counts=counts or {}, excluded=excluded)


def test_points_follow_tier_order():
    scoring = StandardTierScoring()
    assert [scoring.points(t) for t in (TrendTier.SILVER, TrendTier.GOLD, TrendTier.DIAMOND, TrendTier.GOAT)] == [0, 1, 2, 3]


def test_points_are_normalized_by_roster_size_and_ranked():
    weeks = [
        (2, [row("A", "10A", TrendTier.GOAT), row("B", "10A", TrendTier.GOLD), row("C", "10B", TrendTier.DIAMOND)]),
    ]
    board = build(weeks, counts={"10A": 4, "10B": 1})

    assert [s.roll_id for s in board.standings] == ["10B", "10A"]
    a = board.standings[1]
    assert a.raw_points == 4
    assert a.norm_points == 1.0
    assert a.counts == {"silver": 0, "gold": 1, "diamond": 0, "goat": 1}
    assert board.weeks == [2]


def test_missing_roster_gives_zero_normalized_points():
    board = build([(1, [row("A", "11C", TrendTier.GOAT)])])

    standing = board.standings[0]
    assert standing.raw_points == 3
    assert standing.student_count == 0
    assert standing.norm_points == 0


def test_excluded_roll_classes_and_untrended_rows_are_skipped():
    weeks = [(1, [row("A", "STAFF", TrendTier.GOAT), row("B", "10A", None), row("C", "", TrendTier.GOLD)])]
    assert build(weeks).standings == []


def test_ties_keep_first_encountered_roll_class_first():
    weeks = [(1, [row("A", "10B", TrendTier.GOLD), row("B", "10A", TrendTier.GOLD)])]
    board = build(weeks, counts={"10A": 1, "10B": 1})

    assert [s.roll_id for s in board.standings] == ["10B", "10A"]
    assert board.standings[0].norm_points == board.standings[1].norm_points


def test_only_first_twelve_weeks_count():
    weeks = [(w, [row(f"S{w}", "10A", TrendTier.GOLD)]) for w in range(13, 0, -1)]
    board = build(weeks, counts={"10A": 1})

    assert board.weeks == list(range(1, 13))
    assert board.standings[0].raw_points == 12
    assert [w.week for w in board.standings[0].weeks] == list(range(1, 13))


def test_week_breakdown_sums_to_totals():
    weeks = [
        (1, [row("A", "10A", TrendTier.DIAMOND), row("B", "10A", TrendTier.SILVER)]),
        (2, [row("A", "10A", TrendTier.GOAT)]),
    ]
    standing = build(weeks, counts={"10A": 2}).standings[0]

    assert [(w.week, w.points) for w in standing.weeks] == [(1, 2), (2, 3)]
    assert sum(w.points for w in standing.weeks) == standing.raw_points
    assert standing.weeks[0].counts["silver"] == 1


def test_board_survives_document_round_trip():
    board = build([(1, [row("A", "10A", TrendTier.GOLD)])], counts={"10A": 2})

    restored = TermLeaderboard.from_dict(board.to_dict())

    assert restored.to_dict() == board.to_dict()
    assert board.to_dict()["leaderboard"][0]["normPoints"] == 0.5
