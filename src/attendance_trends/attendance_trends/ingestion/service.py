from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from ..common.datetime_utils import now_utc, to_iso
from ..common.validators import require_int_in_range
from ..core.constants import MAX_TERM, MAX_WEEK, MAX_YEAR, MIN_TERM, MIN_WEEK, MIN_YEAR
from ..core.enums import UploadStatus
from ..core.exceptions import DomainError, IngestionFailure, ValidationError
from ..leaderboard.service import LeaderboardService
from ..snapshots.model import snapshot_label
from ..snapshots.repository import SnapshotRepository
from ..snapshots.service import SnapshotService
from ..trends.service import TrendService
from ..uploads.model import Upload
from ..uploads.repository import UploadRepository
from .csv_normalizer import normalize_csv
from .locks import TermLockRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    upload_id: str
    snapshot_id: str
    row_count: int
    label: str
    reused_existing: bool
    deduplicated: bool = False
    compared_weeks: Optional[tuple[int, int]] = None

    def to_dict(self) -> dict:
        return {
            "uploadId": self.upload_id,
            "snapshotId": self.snapshot_id,
            "rowCount": self.row_count,
            "label": self.label,
            "reusedExisting": self.reused_existing,
        }


def upload_checksum(raw: bytes, label: str) -> str:
    digest = hashlib.sha256()
    digest.update(raw)
    digest.update(b"\x00")
    digest.update(label.encode("utf-8"))
    return digest.hexdigest()


class IngestionService:
    """Runs one upload end to end: normalize, store, trend, leaderboard, latest pointer."""

    def __init__(
        self,
        uploads: UploadRepository,
        snapshots: SnapshotRepository,
        snapshot_service: SnapshotService,
        trend_service: TrendService,
        leaderboard_service: LeaderboardService,
        *,
        locks: Optional[TermLockRegistry] = None,
        clock: Callable = now_utc,
    ):
        self._uploads = uploads
        self._snapshots = snapshots
        self._snapshot_service = snapshot_service
        self._trends = trend_service
        self._leaderboards = leaderboard_service
        self._locks = locks or TermLockRegistry()
        self._clock = clock

    @staticmethod
    def validate_target(year, term, week) -> tuple[int, int, int]:
        return (
            require_int_in_range(year, "year", MIN_YEAR, MAX_YEAR),
            require_int_in_range(term, "term", MIN_TERM, MAX_TERM),
            require_int_in_range(week, "week", MIN_WEEK, MAX_WEEK),
        )

    def ingest_upload(
        self,
        *,
        raw: Optional[bytes],
        filename: str,
        year,
        term,
        week,
        uploaded_by: Optional[str] = None,
    ) -> UploadResult:
        year, term, week = self.validate_target(year, term, week)
        if raw is None:
            raise ValidationError("file is required")

        label = snapshot_label(year, term, week)
        checksum = upload_checksum(raw, label)

        prior = self._uploads.find_by_checksum(checksum, status=UploadStatus.PROCESSED)
        p = next((u for u in prior if self._still_current(u)), None)
        if p is not None:
            logger.info("Upload %s for %s already processed; returning prior result", p.upload_id, label)
            return UploadResult(
                upload_id=p.upload_id,
                snapshot_id=p.snapshot_id,
                row_count=p.row_count,
                label=p.label,
                reused_existing=p.reused_existing,
                deduplicated=True,
            )

        upload = Upload(
            upload_id=self._uploads.new_id(),
            filename=filename or "upload.csv",
            checksum=checksum,
            uploaded_by=uploaded_by,
            status=UploadStatus.PROCESSING,
            year=year,
            term=term,
            week=week,
            label=label,
            created_at=to_iso(self._clock()),
        )

        try:
            self._uploads.save(upload)
            with self._locks.hold(year=year, term=term):
                return self._run(upload, raw)
        except DomainError as e:
            self._mark_failed(checksum, reason=str(e))
            raise
        except Exception as e:
            logger.exception("Ingestion of %s (%s) failed", upload.filename, label)
            self._mark_failed(checksum, reason=type(e).__name__)
            raise IngestionFailure("Ingestion failed") from e

    def _still_current(self, upload: Upload) -> bool:
        # Rows belong to this upload only while the snapshot still points at it.
        if not upload.snapshot_id:
            return False
        snapshot = self._snapshots.get(upload.snapshot_id)
        return snapshot is not None and snapshot.upload_id == upload.upload_id

    def _run(self, upload: Upload, raw: bytes) -> UploadResult:
        normalized = normalize_csv(raw)

        stored = self._snapshot_service.ingest(
            year=upload.year,
            term=upload.term,
            week=upload.week,
            rows=normalized.rows,
            upload_id=upload.upload_id,
        )
        trend = self._trends.recompute_after_ingest(year=upload.year, term=upload.term, week=upload.week)
        self._leaderboards.recompute_term_leaderboard(year=upload.year, term=upload.term)
        self._snapshots.set_latest(trend.latest_snapshot_id)

        self._uploads.save(
            replace(
                upload,
                status=UploadStatus.PROCESSED,
                row_count=stored.rows_written,
                input_row_count=normalized.input_row_count,
                snapshot_id=stored.snapshot_id,
                reused_existing=stored.reused_existing,
                finished_at=to_iso(self._clock()),
            )
        )
        logger.info(
            "Upload %s processed: %s, %d of %d rows stored (reused=%s)",
            upload.upload_id, upload.label, stored.rows_written, normalized.input_row_count, stored.reused_existing,
        )
        return UploadResult(
            upload_id=upload.upload_id,
            snapshot_id=stored.snapshot_id,
            row_count=stored.rows_written,
            label=stored.label,
            reused_existing=stored.reused_existing,
            compared_weeks=trend.compared_weeks,
        )

    def _mark_failed(self, checksum: str, *, reason: str) -> None:
        # Best effort: never let bookkeeping replace the original error.
        try:
            for u in self._uploads.find_by_checksum(checksum, status=UploadStatus.PROCESSING):
                self._uploads.save(
                    replace(u, status=UploadStatus.FAILED, error=reason[:200], finished_at=to_iso(self._clock()))
                )
        except Exception:
            logger.warning("Could not mark upload %s as failed", checksum[:12], exc_info=True)
