from __future__ import annotations

import uuid
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_utc, to_iso
from ..core.enums import TrendTier
from ..database.document_store import Document, DocumentStore, WriteOp, write_in_batches
from ..database.paths import SchoolPaths
from ..ingestion.csv_normalizer import AttendanceRow
from .model import Snapshot, SnapshotRow, TrendMeta, TrendUpdate, as_finite_float, snapshot_label
from .repository import SnapshotRepository


def _to_snapshot(doc: Document) -> Snapshot:
    d = doc.data
    year, term, week = int(d["year"]), int(d["term"]), int(d["week"])
    return Snapshot(
        snapshot_id=doc.id,
        year=year,
        term=term,
        week=week,
        label=d.get("label") or snapshot_label(year, term, week),
        is_latest=bool(d.get("isLatest", False)),
        class_list=list(d.get("classList") or []),
        upload_id=d.get("uploadId"),
        row_count=int(d.get("rowCount") or 0),
        created_at=d.get("createdAt"),
        updated_at=d.get("updatedAt"),
    )


def _to_row(doc: Document) -> SnapshotRow:
    d = doc.data
    return SnapshotRow(
        key=doc.id,
        external_id=str(d.get("externalId") or doc.id),
        roll_class=str(d.get("rollClass") or ""),
        pct_present=as_finite_float(d.get("pctPresent")),
        trend=TrendTier.parse(d.get("trend")),
        trend_meta=TrendMeta.from_dict(d.get("trendMeta")),
    )


class DocumentSnapshotRepository(SnapshotRepository):
    def __init__(self, store: DocumentStore, paths: SchoolPaths):
        self._store = store
        self._paths = paths

    def new_id(self) -> str:
        return uuid.uuid4().hex[:20]

    def get(self, snapshot_id: str) -> Optional[Snapshot]:
        doc = self._store.get(self._paths.snapshot(snapshot_id))
        return _to_snapshot(doc) if doc else None

    def find_by_key(self, *, year: int, term: int, week: int) -> Optional[Snapshot]:
        docs = self._store.query(self._paths.snapshots(), year=int(year), term=int(term), week=int(week))
        if not docs:
            return None
        # The key is unique; if a race ever produced two, prefer the oldest.
        snapshots = sorted((_to_snapshot(d) for d in docs), key=lambda s: (s.created_at or "", s.snapshot_id))
        return snapshots[0]

    def list_for_term(self, *, year: int, term: int) -> Sequence[Snapshot]:
        docs = self._store.query(self._paths.snapshots(), year=int(year), term=int(term))
        return sorted((_to_snapshot(d) for d in docs), key=lambda s: (s.week, s.snapshot_id))

    def list_all(self) -> Sequence[Snapshot]:
        return [_to_snapshot(d) for d in self._store.list(self._paths.snapshots())]

    def save(self, snapshot: Snapshot) -> None:
        data: dict[str, Any] = {
            "year": snapshot.year,
            "term": snapshot.term,
            "week": snapshot.week,
            "label": snapshot.label,
            "isLatest": snapshot.is_latest,
            "classList": list(snapshot.class_list),
            "uploadId": snapshot.upload_id,
            "rowCount": snapshot.row_count,
            "createdAt": snapshot.created_at,
            "updatedAt": snapshot.updated_at,
        }
        self._store.batch().set(self._paths.snapshot(snapshot.snapshot_id), data, merge=True).commit()

    def delete_rows(self, snapshot_id: str) -> int:
        docs = self._store.list(self._paths.rows(snapshot_id))
        write_in_batches(self._store, [WriteOp(kind="delete", path=d.path) for d in docs])
        return len(docs)

    def write_rows(self, snapshot_id: str, rows: Sequence[AttendanceRow]) -> int:
        by_key: dict[str, AttendanceRow] = {}
        for r in rows:
            by_key[r.key] = r

        ops = [
            WriteOp(
                kind="set",
                path=self._paths.row(snapshot_id, key),
                data={
                    "externalId": r.external_id,
                    "rollClass": r.roll_class,
                    "pctPresent": r.pct_present,
                    "trend": None,
                    "trendMeta": None,
                },
            )
            for key, r in by_key.items()
        ]
        write_in_batches(self._store, ops)
        return len(ops)

    def list_rows(self, snapshot_id: str, *, roll_class: Optional[str] = None) -> Sequence[SnapshotRow]:
        collection = self._paths.rows(snapshot_id)
        docs = self._store.query(collection, rollClass=roll_class) if roll_class is not None else self._store.list(collection)
        return sorted((_to_row(d) for d in docs), key=lambda r: r.key)

    def get_row(self, snapshot_id: str, key: str) -> Optional[SnapshotRow]:
        doc = self._store.get(self._paths.row(snapshot_id, key))
        return _to_row(doc) if doc else None

    def update_trends(self, snapshot_id: str, updates: Sequence[TrendUpdate]) -> int:
        ops = [
            WriteOp(
                kind="set",
                path=self._paths.row(snapshot_id, u.key),
                data={
                    "trend": u.trend.value if u.trend else None,
                    "trendMeta": u.meta.to_dict() if u.meta else None,
                },
                merge=True,
            )
            for u in updates
        ]
        return write_in_batches(self._store, ops)

    def get_latest(self) -> Optional[Snapshot]:
        school = self._store.get(self._paths.school())
        snapshot_id = school.data.get("latestSnapshotId") if school else None
        if snapshot_id:
            return self.get(snapshot_id)
        flagged = self._store.query(self._paths.snapshots(), isLatest=True)
        return _to_snapshot(flagged[0]) if flagged else None

    def set_latest(self, snapshot_id: str) -> None:
        stamp = to_iso(now_utc())
        batch = self._store.batch()
        for doc in self._store.query(self._paths.snapshots(), isLatest=True):
            if doc.id != snapshot_id:
                batch.set(doc.path, {"isLatest": False}, merge=True)
        batch.set(self._paths.snapshot(snapshot_id), {"isLatest": True}, merge=True)
        batch.set(
            self._paths.school(),
            {"latestSnapshotId": snapshot_id, "latestUpdatedAt": stamp},
            merge=True,
        )
        batch.commit()
