from __future__ import annotations

import pytest

from src.attendance_trends.attendance_trends.core.exceptions import StoreUnavailable
from src.attendance_trends.attendance_trends.database.memory_document_store import InMemoryDocumentStore
from src.attendance_trends.attendance_trends.database.paths import SchoolPaths
from src.attendance_trends.attendance_trends.ingestion.csv_normalizer import AttendanceRow
from src.attendance_trends.attendance_trends.snapshots.document_snapshot_repository import DocumentSnapshotRepository
from src.attendance_trends.attendance_trends.snapshots.service import SnapshotService


class RecordingStore(InMemoryDocumentStore):
    def __init__(self, fail_on_batch=None):
        super().__init__()
        self.batch_sizes = []
        self._fail_on_batch = fail_on_batch

    def _apply(self, ops):
        if self._fail_on_batch is not None and len(self.batch_sizes) + 1 == self._fail_on_batch:
            raise StoreUnavailable("store went away")
        self.batch_sizes.append(len(ops))
        super()._apply(ops)


def _rows(n, roll_class="10A"):
    return [AttendanceRow(external_id=f"S{i:04d}", roll_class=roll_class, pct_present=90.0) for i in range(n)]


def _service(store, fixed_now):
    repo = DocumentSnapshotRepository(store, SchoolPaths("test-school"))
    return repo, SnapshotService(repo, clock=lambda: fixed_now)


def test_new_snapshot_records_label_classes_and_count(store, fixed_now):
    repo, service = _service(store, fixed_now)
    rows = _rows(2, "10B") + [AttendanceRow("X1", "10A", 75.0)]

    result = service.ingest(year=2025, term=3, week=2, rows=rows, upload_id="u1")

    snapshot = repo.get(result.snapshot_id)
    assert result.label == "2025 T3 W2"
    assert result.reused_existing is False
    assert snapshot.class_list == ["10A", "10B"]
    assert snapshot.row_count == 3
    assert snapshot.upload_id == "u1"
    assert snapshot.created_at == "2025-08-04T09:30:00+00:00"


def test_reupload_replaces_rows_and_keeps_snapshot_id(store, fixed_now):
    repo, service = _service(store, fixed_now)
    first = service.ingest(year=2025, term=3, week=2, rows=[AttendanceRow("A", "10A", 80.0), AttendanceRow("B", "10A", 90.0)])

    second = service.ingest(year=2025, term=3, week=2, rows=[AttendanceRow("C", "10B", 70.0)])

    assert second.snapshot_id == first.snapshot_id
    assert second.reused_existing is True
    assert len(repo.list_for_term(year=2025, term=3)) == 1
    assert [(r.external_id, r.roll_class) for r in repo.list_rows(second.snapshot_id)] == [("C", "10B")]
    assert repo.get(second.snapshot_id).class_list == ["10B"]


def test_duplicate_student_ids_keep_last_row(store, fixed_now):
    repo, service = _service(store, fixed_now)
    rows = [AttendanceRow("S/1", "10A", 50.0), AttendanceRow("S/1", "10B", 60.0)]

    result = service.ingest(year=2025, term=3, week=1, rows=rows)

    stored = repo.list_rows(result.snapshot_id)
    assert result.rows_written == 1
    assert [(r.key, r.external_id, r.roll_class, r.pct_present) for r in stored] == [("S_1", "S/1", "10B", 60.0)]


def test_large_uploads_are_split_into_capped_batches(fixed_now):
    store = RecordingStore()
    repo, service = _service(store, fixed_now)

    result = service.ingest(year=2025, term=3, week=1, rows=_rows(1201))

    assert result.rows_written == 1201
    assert len(repo.list_rows(result.snapshot_id)) == 1201
    assert max(store.batch_sizes) <= 500
    assert store.batch_sizes.count(500) == 2


def test_failed_row_batch_leaves_earlier_batches_persisted(fixed_now):
    # batch 1 is the snapshot header, batches 2 and 3 are rows
    store = RecordingStore(fail_on_batch=3)
    repo, service = _service(store, fixed_now)

    with pytest.raises(StoreUnavailable):
        service.ingest(year=2025, term=3, week=1, rows=_rows(700))

    snapshot = repo.find_by_key(year=2025, term=3, week=1)
    assert snapshot is not None
    assert len(repo.list_rows(snapshot.snapshot_id)) == 500


def test_list_rows_filters_by_roll_class(store, fixed_now):
    repo, service = _service(store, fixed_now)
    result = service.ingest(
        year=2025, term=3, week=1,
        rows=[AttendanceRow("A", "10A", 80.0), AttendanceRow("B", "10B", 90.0), AttendanceRow("C", "10A", 70.0)],
    )

    assert [r.external_id for r in repo.list_rows(result.snapshot_id, roll_class="10A")] == ["A", "C"]


def test_set_latest_moves_the_flag(store, fixed_now):
    repo, service = _service(store, fixed_now)
    w1 = service.ingest(year=2025, term=3, week=1, rows=[AttendanceRow("A", "10A", 80.0)])
    w2 = service.ingest(year=2025, term=3, week=2, rows=[AttendanceRow("A", "10A", 80.0)])

    repo.set_latest(w1.snapshot_id)
    repo.set_latest(w2.snapshot_id)

    flagged = [s.snapshot_id for s in repo.list_all() if s.is_latest]
    assert flagged == [w2.snapshot_id]
    assert repo.get_latest().snapshot_id == w2.snapshot_id
