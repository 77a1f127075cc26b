from __future__ import annotations

from statistics import mean
from typing import Any, Optional

from ..core.exceptions import NotFoundError
from ..ingestion.csv_normalizer import sanitize_external_id
from ..roster.repository import RosterRepository
from ..snapshots.model import Snapshot, SnapshotRow
from ..snapshots.repository import SnapshotRepository
from ..users.service import Caller


class StudentSummaryService:
    """Self-service view: a student's own attendance and latest trend."""

    def __init__(self, snapshots: SnapshotRepository, roster: RosterRepository):
        self._snapshots = snapshots
        self._roster = roster

    @staticmethod
    def _require_external_id(caller: Caller) -> str:
        if not caller.external_id:
            raise NotFoundError("No student record is linked to this account")
        return caller.external_id

    def _term_rows(self, external_id: str, *, year: int, term: int) -> list[tuple[Snapshot, SnapshotRow]]:
        key = sanitize_external_id(external_id)
        out = []
        for s in sorted(self._snapshots.list_for_term(year=year, term=term), key=lambda s: s.week):
            row = self._snapshots.get_row(s.snapshot_id, key)
            if row:
                out.append((s, row))
        return out

    def _year_percents(self, external_id: str, *, year: int) -> list[float]:
        key = sanitize_external_id(external_id)
        out = []
        for s in self._snapshots.list_all():
            if s.year != year:
                continue
            row = self._snapshots.get_row(s.snapshot_id, key)
            if row and row.pct_present is not None:
                out.append(row.pct_present)
        return out

    def summary(self, caller: Caller) -> dict[str, Any]:
        external_id = self._require_external_id(caller)
        latest = self._snapshots.get_latest()
        if not latest:
            raise NotFoundError("No attendance data has been uploaded yet")

        found = self._term_rows(external_id, year=latest.year, term=latest.term)
        if not found:
            raise NotFoundError("We couldn't find your record in the current term")

        snapshot, row = found[-1]
        pcts = [r.pct_present for _, r in found if r.pct_present is not None]
        roster_entry = self._roster.get(external_id)
        term_percent: Optional[float] = round(mean(pcts), 1) if pcts else None
        ytd = self._year_percents(external_id, year=latest.year)
        return {
            "externalId": external_id,
            "rollClass": row.roll_class or (roster_entry.roll_class if roster_entry else None),
            "year": snapshot.year,
            "term": snapshot.term,
            "week": snapshot.week,
            "termPercent": term_percent,
            "ytdPercent": round(mean(ytd), 1) if ytd else None,
            "latestPercent": row.pct_present,
            "trend": row.trend.value if row.trend else None,
            "trendMeta": row.trend_meta.to_dict() if row.trend_meta else None,
            "updatedAt": snapshot.updated_at,
        }

    def term_detail(self, caller: Caller, *, year: int, term: int) -> dict[str, Any]:
        external_id = self._require_external_id(caller)
        found = self._term_rows(external_id, year=year, term=term)
        return {
            "year": int(year),
            "term": int(term),
            "weeks": [
                {
                    "week": s.week,
                    "pctPresent": r.pct_present,
                    "trend": r.trend.value if r.trend else None,
                }
                for s, r in found
            ],
        }
