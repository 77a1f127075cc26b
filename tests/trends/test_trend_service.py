from __future__ import annotations

import pytest

from src.attendance_trends.attendance_trends.core.enums import TrendTier
from src.attendance_trends.attendance_trends.core.exceptions import NotFoundError
from src.attendance_trends.attendance_trends.ingestion.csv_normalizer import AttendanceRow
from src.attendance_trends.attendance_trends.snapshots.document_snapshot_repository import DocumentSnapshotRepository
from src.attendance_trends.attendance_trends.database.paths import SchoolPaths
from src.attendance_trends.attendance_trends.snapshots.service import SnapshotService
from src.attendance_trends.attendance_trends.trends.service import TrendService


@pytest.fixture
def repo(store):
    return DocumentSnapshotRepository(store, SchoolPaths("test-school"))


@pytest.fixture
def snapshot_service(repo, fixed_now):
    return SnapshotService(repo, clock=lambda: fixed_now)


def _ingest(service, week, rows):
    return service.ingest(
        year=2025,
        term=3,
        week=week,
        rows=[AttendanceRow(external_id=e, roll_class=rc, pct_present=p) for e, rc, p in rows],
    )


def _trends(repo, snapshot_id):
    return {r.external_id: r.trend for r in repo.list_rows(snapshot_id)}


def test_single_week_leaves_every_row_unlabelled(repo, snapshot_service):
    w1 = _ingest(snapshot_service, 1, [("S1", "10A", 90), ("S2", "10A", 100)])

    result = TrendService(repo).recompute_latest_trend(year=2025, term=3)

    assert result.compared_weeks is None
    assert result.labelled == 0
    assert _trends(repo, w1.snapshot_id) == {"S1": None, "S2": None}


def test_latest_week_compared_with_previous_recorded_week(repo, snapshot_service):
    _ingest(snapshot_service, 1, [("S1", "10A", 80), ("S2", "10A", 100), ("S3", "10B", 90)])
    w3 = _ingest(snapshot_service, 3, [("S1", "10A", 85), ("S2", "10A", 100), ("S3", "10B", 70), ("S4", "10B", 95)])

    result = TrendService(repo).recompute_latest_trend(year=2025, term=3)

    assert result.compared_weeks == (1, 3)
    assert result.labelled == 3
    assert result.unlabelled == 1
    assert _trends(repo, w3.snapshot_id) == {
        "S1": TrendTier.DIAMOND,
        "S2": TrendTier.GOAT,
        "S3": TrendTier.SILVER,
        "S4": None,
    }

    meta = repo.get_row(w3.snapshot_id, "S1").trend_meta
    assert (meta.prev_week, meta.week, meta.prev, meta.curr) == (1, 3, 80.0, 85.0)
    assert meta.epsilon == 0.1
    assert repo.get_row(w3.snapshot_id, "S4").trend_meta is None


def test_backfilled_earlier_week_recomputes_against_latest(repo, snapshot_service):
    _ingest(snapshot_service, 1, [("S1", "10A", 50)])
    w3 = _ingest(snapshot_service, 3, [("S1", "10A", 60)])
    service = TrendService(repo)
    service.recompute_latest_trend(year=2025, term=3)

    _ingest(snapshot_service, 2, [("S1", "10A", 70)])
    result = service.recompute_latest_trend(year=2025, term=3)

    assert result.latest_snapshot_id == w3.snapshot_id
    assert result.compared_weeks == (2, 3)
    assert _trends(repo, w3.snapshot_id) == {"S1": TrendTier.SILVER}


def test_empty_term_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        TrendService(repo).recompute_latest_trend(year=2025, term=1)


def test_recompute_after_ingest_relabels_a_middle_week(repo, snapshot_service):
    _ingest(snapshot_service, 1, [("S1", "10A", 80)])
    w2 = _ingest(snapshot_service, 2, [("S1", "10A", 70)])
    w3 = _ingest(snapshot_service, 3, [("S1", "10A", 70)])

    result = TrendService(repo).recompute_after_ingest(year=2025, term=3, week=2)

    assert result.latest_snapshot_id == w3.snapshot_id
    assert result.compared_weeks == (2, 3)
    assert _trends(repo, w2.snapshot_id) == {"S1": TrendTier.SILVER}
    assert _trends(repo, w3.snapshot_id) == {"S1": TrendTier.GOLD}


def test_recompute_week_trend_for_unknown_week(repo, snapshot_service):
    _ingest(snapshot_service, 1, [("S1", "10A", 80)])

    with pytest.raises(NotFoundError):
        TrendService(repo).recompute_week_trend(year=2025, term=3, week=4)
