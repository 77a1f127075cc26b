from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import UploadStatus


@dataclass(frozen=True)
class Upload:
    """Audit record of one CSV upload."""

    upload_id: str
    filename: str
    checksum: str
    uploaded_by: Optional[str]
    status: UploadStatus
    year: int
    term: int
    week: int
    label: str
    row_count: int = 0
    input_row_count: int = 0
    snapshot_id: Optional[str] = None
    reused_existing: bool = False
    error: Optional[str] = None
    created_at: Optional[str] = None
    finished_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "checksum": self.checksum,
            "uploadedBy": self.uploaded_by,
            "status": self.status.value,
            "year": self.year,
            "term": self.term,
            "week": self.week,
            "label": self.label,
            "rowCount": self.row_count,
            "inputRowCount": self.input_row_count,
            "snapshotId": self.snapshot_id,
            "reusedExisting": self.reused_existing,
            "error": self.error,
            "createdAt": self.created_at,
            "finishedAt": self.finished_at,
        }

    @classmethod
    def from_dict(cls, upload_id: str, d: dict) -> "Upload":
        return cls(
            upload_id=upload_id,
            filename=str(d.get("filename") or ""),
            checksum=str(d.get("checksum") or ""),
            uploaded_by=d.get("uploadedBy"),
            status=UploadStatus(d.get("status") or UploadStatus.PROCESSING.value),
            year=int(d["year"]),
            term=int(d["term"]),
            week=int(d["week"]),
            label=str(d.get("label") or ""),
            row_count=int(d.get("rowCount") or 0),
            input_row_count=int(d.get("inputRowCount") or 0),
            snapshot_id=d.get("snapshotId"),
            reused_existing=bool(d.get("reusedExisting", False)),
            error=d.get("error"),
            created_at=d.get("createdAt"),
            finished_at=d.get("finishedAt"),
        )
