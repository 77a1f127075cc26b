from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import now_utc, to_iso
from ..core.constants import DEFAULT_EXCLUDED_ROLL_CLASSES, MAX_TERM_WEEKS
from ..roster.repository import RosterRepository
from ..snapshots.model import SnapshotRow
from ..snapshots.repository import SnapshotRepository
from .model import RollClassStanding, TermLeaderboard, WeekBreakdown, empty_counts
from .repository import LeaderboardRepository
from .scoring.base import TierScoring
from .scoring.standard_scoring import StandardTierScoring

logger = logging.getLogger(__name__)


def aggregate_leaderboard(
    *,
    year: int,
    term: int,
    weeks: Sequence[tuple[int, Sequence[SnapshotRow]]],
    student_counts: dict[str, int],
    excluded: Iterable[str] = DEFAULT_EXCLUDED_ROLL_CLASSES,
    scoring: Optional[TierScoring] = None,
    updated_at: Optional[str] = None,
) -> TermLeaderboard:
    """Build a term leaderboard from scratch.

    `weeks` is (week, rows) pairs; only the first MAX_TERM_WEEKS weeks in
    ascending order count. Pure: the same inputs always give the same board.
    """
    scoring = scoring or StandardTierScoring()
    excluded_lower = {e.strip().lower() for e in excluded}
    included = sorted(weeks, key=lambda w: w[0])[:MAX_TERM_WEEKS]

    # Insertion order of these dicts is the tie-break order for the final sort.
    totals: dict[str, dict[str, int]] = {}
    points: dict[str, int] = {}
    per_week: dict[str, dict[int, WeekBreakdown]] = {}

    for week, rows in included:
        for r in rows:
            roll_class = (r.roll_class or "").strip()
            if not roll_class or roll_class.lower() in excluded_lower or r.trend is None:
                continue

            tier_points = scoring.points(r.trend)
            counts = totals.setdefault(roll_class, empty_counts())
            counts[r.trend.value] += 1
            points[roll_class] = points.get(roll_class, 0) + tier_points

            breakdowns = per_week.setdefault(roll_class, {})
            wb = breakdowns.get(week) or WeekBreakdown(week=week, counts=empty_counts(), points=0)
            wb.counts[r.trend.value] += 1
            breakdowns[week] = WeekBreakdown(week=week, counts=wb.counts, points=wb.points + tier_points)

    standings: list[RollClassStanding] = []
    for roll_class, counts in totals.items():
        raw = points.get(roll_class, 0)
        student_count = int(student_counts.get(roll_class, 0) or 0)
        norm = raw / student_count if student_count > 0 else 0.0
        standings.append(
            RollClassStanding(
                roll_id=roll_class,
                counts=counts,
                raw_points=raw,
                norm_points=norm,
                student_count=student_count,
                weeks=[per_week[roll_class][w] for w in sorted(per_week[roll_class])],
            )
        )

    standings.sort(key=lambda s: s.norm_points, reverse=True)
    return TermLeaderboard(
        year=int(year),
        term=int(term),
        weeks=[w for w, _ in included],
        standings=standings,
        updated_at=updated_at,
    )


class LeaderboardService:
    def __init__(
        self,
        snapshots: SnapshotRepository,
        roster: RosterRepository,
        leaderboards: LeaderboardRepository,
        *,
        scoring: Optional[TierScoring] = None,
        excluded_roll_classes: Iterable[str] = DEFAULT_EXCLUDED_ROLL_CLASSES,
        clock: Callable = now_utc,
    ):
        self._snapshots = snapshots
        self._roster = roster
        self._leaderboards = leaderboards
        self._scoring = scoring or StandardTierScoring()
        self._excluded = frozenset(excluded_roll_classes)
        self._clock = clock

    def recompute_term_leaderboard(self, *, year: int, term: int) -> TermLeaderboard:
        term_snapshots = sorted(self._snapshots.list_for_term(year=year, term=term), key=lambda s: s.week)
        included = term_snapshots[:MAX_TERM_WEEKS]
        weeks = [(s.week, self._snapshots.list_rows(s.snapshot_id)) for s in included]

        board = aggregate_leaderboard(
            year=year,
            term=term,
            weeks=weeks,
            student_counts=self._roster.student_counts(),
            excluded=self._excluded,
            scoring=self._scoring,
            updated_at=to_iso(self._clock()),
        )
        self._leaderboards.replace(board)
        logger.info("Leaderboard %s T%s rebuilt over weeks %s (%d roll classes)", year, term, board.weeks, len(board.standings))
        return board

    def get_term_leaderboard(self, *, year: int, term: int) -> TermLeaderboard:
        board = self._leaderboards.get(year=year, term=term)
        if board is None:
            return TermLeaderboard(year=int(year), term=int(term), weeks=[], standings=[])
        return board
