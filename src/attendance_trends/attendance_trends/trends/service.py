from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.constants import TREND_SCHEMA_VERSION
from ..core.exceptions import NotFoundError
from ..snapshots.model import Snapshot, TrendMeta, TrendUpdate
from ..snapshots.repository import SnapshotRepository
from .classifier import TrendClassifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendRecomputeResult:
    snapshot_id: str
    latest_snapshot_id: str
    compared_weeks: Optional[tuple[int, int]]
    labelled: int
    unlabelled: int


class TrendService:
    """Labels a week of a term against the week recorded before it."""

    def __init__(self, snapshots: SnapshotRepository, *, classifier: Optional[TrendClassifier] = None):
        self._snapshots = snapshots
        self._classifier = classifier or TrendClassifier()

    def _ordered(self, year: int, term: int) -> list[Snapshot]:
        term_snapshots = self._snapshots.list_for_term(year=year, term=term)
        if not term_snapshots:
            raise NotFoundError(f"No snapshots for {year} term {term}")
        return sorted(term_snapshots, key=lambda s: s.week)

    def recompute_latest_trend(self, *, year: int, term: int) -> TrendRecomputeResult:
        ordered = self._ordered(year, term)
        return self._label(ordered, len(ordered) - 1)

    def recompute_week_trend(self, *, year: int, term: int, week: int) -> TrendRecomputeResult:
        ordered = self._ordered(year, term)
        idx = next((i for i, s in enumerate(ordered) if s.week == int(week)), None)
        if idx is None:
            raise NotFoundError(f"No snapshot for {year} term {term} week {week}")
        return self._label(ordered, idx)

    def recompute_after_ingest(self, *, year: int, term: int, week: int) -> TrendRecomputeResult:
        """Relabel every week whose comparison an ingest of `week` can change.

        That is the latest week, the ingested week and the week recorded right
        after it. Returns the result for the latest week.
        """
        ordered = self._ordered(year, term)
        latest_idx = len(ordered) - 1
        idx = next((i for i, s in enumerate(ordered) if s.week == int(week)), latest_idx)

        for i in (idx, idx + 1):
            if i < latest_idx:
                self._label(ordered, i)
        return self._label(ordered, latest_idx)

    def _label(self, ordered: Sequence[Snapshot], idx: int) -> TrendRecomputeResult:
        target = ordered[idx]
        prev = ordered[idx - 1] if idx > 0 else None

        prev_by_id: dict[str, float] = {}
        if prev:
            for r in self._snapshots.list_rows(prev.snapshot_id):
                if r.pct_present is not None:
                    prev_by_id[r.external_id] = r.pct_present

        updates: list[TrendUpdate] = []
        labelled = 0
        for r in self._snapshots.list_rows(target.snapshot_id):
            prev_pct = prev_by_id.get(r.external_id)
            tier = self._classifier.classify(r.pct_present, prev_pct)
            meta = None
            if tier is not None:
                labelled += 1
                meta = TrendMeta(
                    prev_week=prev.week,
                    week=target.week,
                    prev=prev_pct,
                    curr=r.pct_present,
                    epsilon=self._classifier.epsilon,
                    version=TREND_SCHEMA_VERSION,
                )
            updates.append(TrendUpdate(key=r.key, trend=tier, meta=meta))

        self._snapshots.update_trends(target.snapshot_id, updates)

        compared = (prev.week, target.week) if prev else None
        logger.info(
            "Trend recomputed for %s T%s on week %s (compared=%s, labelled=%d, unlabelled=%d)",
            target.year, target.term, target.week, compared, labelled, len(updates) - labelled,
        )
        return TrendRecomputeResult(
            snapshot_id=target.snapshot_id,
            latest_snapshot_id=ordered[-1].snapshot_id,
            compared_weeks=compared,
            labelled=labelled,
            unlabelled=len(updates) - labelled,
        )
