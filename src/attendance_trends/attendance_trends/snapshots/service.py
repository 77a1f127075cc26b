from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc, to_iso
from ..ingestion.csv_normalizer import AttendanceRow
from .model import IngestResult, Snapshot, snapshot_label
from .repository import SnapshotRepository

logger = logging.getLogger(__name__)


class SnapshotService:
    """Owns snapshot identity and the full-replace lifecycle of its rows."""

    def __init__(self, snapshots: SnapshotRepository, *, clock: Callable = now_utc):
        self._snapshots = snapshots
        self._clock = clock

    def ingest(
        self,
        *,
        year: int,
        term: int,
        week: int,
        rows: Sequence[AttendanceRow],
        upload_id: Optional[str] = None,
    ) -> IngestResult:
        stamp = to_iso(self._clock())
        label = snapshot_label(year, term, week)

        existing = self._snapshots.find_by_key(year=year, term=term, week=week)
        if existing:
            snapshot = replace(existing, updated_at=stamp, upload_id=upload_id)
            deleted = self._snapshots.delete_rows(existing.snapshot_id)
            logger.info("Reusing snapshot %s (%s); deleted %d existing rows", existing.snapshot_id, label, deleted)
        else:
            snapshot = Snapshot(
                snapshot_id=self._snapshots.new_id(),
                year=int(year),
                term=int(term),
                week=int(week),
                label=label,
                upload_id=upload_id,
                created_at=stamp,
                updated_at=stamp,
            )
            logger.info("Created snapshot %s (%s)", snapshot.snapshot_id, label)

        # Header first so the (year, term, week) key resolves even if a row batch fails.
        self._snapshots.save(snapshot)

        written = self._snapshots.write_rows(snapshot.snapshot_id, rows)
        class_list = sorted({r.roll_class for r in rows})
        self._snapshots.save(replace(snapshot, class_list=class_list, row_count=written))

        return IngestResult(
            snapshot_id=snapshot.snapshot_id,
            rows_written=written,
            reused_existing=existing is not None,
            label=label,
        )
