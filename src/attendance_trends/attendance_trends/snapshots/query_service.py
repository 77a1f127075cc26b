from __future__ import annotations

from typing import Any, Optional

from ..core.constants import MAX_TERM_WEEKS
from ..core.exceptions import NotFoundError
from .repository import SnapshotRepository


class SnapshotQueryService:
    """Read-only views over stored snapshots for the teacher dashboard."""

    def __init__(self, snapshots: SnapshotRepository):
        self._snapshots = snapshots

    def latest_meta(self) -> dict[str, Any]:
        latest = self._snapshots.get_latest()
        if not latest:
            return {"snapshotId": None, "uploadedAt": None}
        return {
            "snapshotId": latest.snapshot_id,
            "uploadedAt": latest.updated_at,
            "year": latest.year,
            "term": latest.term,
            "week": latest.week,
            "label": latest.label,
        }

    def latest_classes(self) -> list[dict[str, str]]:
        latest = self._snapshots.get_latest()
        if not latest:
            return []
        classes = latest.class_list or sorted({r.roll_class for r in self._snapshots.list_rows(latest.snapshot_id)})
        return [{"rollClass": rc} for rc in classes if rc]

    def latest_class_rows(self, roll_class: str) -> list[dict[str, Any]]:
        latest = self._snapshots.get_latest()
        if not latest:
            return []
        rows = self._snapshots.list_rows(latest.snapshot_id, roll_class=roll_class)
        return [
            {
                "externalId": r.external_id,
                "pctPresent": r.pct_present,
                "trend": r.trend.value if r.trend else None,
                "trendMeta": r.trend_meta.to_dict() if r.trend_meta else None,
            }
            for r in rows
        ]

    def list_terms(self) -> list[dict[str, Any]]:
        weeks_by_term: dict[tuple[int, int], set[int]] = {}
        for s in self._snapshots.list_all():
            weeks_by_term.setdefault((s.year, s.term), set()).add(s.week)
        return [
            {"year": year, "term": term, "weeks": sorted(weeks)}
            for (year, term), weeks in sorted(weeks_by_term.items(), reverse=True)
        ]

    def term_classes(self, *, year: int, term: int) -> list[dict[str, str]]:
        classes: set[str] = set()
        for s in self._snapshots.list_for_term(year=year, term=term):
            classes.update(rc for rc in s.class_list if rc)
        return [{"rollClass": rc} for rc in sorted(classes)]

    def class_rollup(self, *, year: int, term: int, roll_class: str) -> dict[str, Any]:
        snapshots = sorted(self._snapshots.list_for_term(year=year, term=term), key=lambda s: s.week)[:MAX_TERM_WEEKS]
        if not snapshots:
            raise NotFoundError(f"No snapshots for {year} term {term}")

        weeks = [s.week for s in snapshots]
        values: dict[str, list[Optional[float]]] = {}
        for idx, s in enumerate(snapshots):
            for r in self._snapshots.list_rows(s.snapshot_id, roll_class=roll_class):
                values.setdefault(r.external_id, [None] * len(weeks))[idx] = r.pct_present

        return {
            "year": int(year),
            "term": int(term),
            "rollClass": roll_class,
            "weeks": weeks,
            "rows": [{"externalId": ext, "weekValues": vals} for ext, vals in sorted(values.items())],
        }
