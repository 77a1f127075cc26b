from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..ingestion.csv_normalizer import AttendanceRow
from .model import Snapshot, SnapshotRow, TrendUpdate


class SnapshotRepository(Protocol):
    def new_id(self) -> str:
        raise NotImplementedError

    def get(self, snapshot_id: str) -> Optional[Snapshot]:
        raise NotImplementedError

    def find_by_key(self, *, year: int, term: int, week: int) -> Optional[Snapshot]:
        raise NotImplementedError

    def list_for_term(self, *, year: int, term: int) -> Sequence[Snapshot]:
        """Snapshots of a term ordered by week ascending."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Snapshot]:
        raise NotImplementedError

    def save(self, snapshot: Snapshot) -> None:
        raise NotImplementedError

    def delete_rows(self, snapshot_id: str) -> int:
        raise NotImplementedError

    def write_rows(self, snapshot_id: str, rows: Sequence[AttendanceRow]) -> int:
        raise NotImplementedError

    def list_rows(self, snapshot_id: str, *, roll_class: Optional[str] = None) -> Sequence[SnapshotRow]:
        raise NotImplementedError

    def get_row(self, snapshot_id: str, key: str) -> Optional[SnapshotRow]:
        raise NotImplementedError

    def update_trends(self, snapshot_id: str, updates: Sequence[TrendUpdate]) -> int:
        raise NotImplementedError

    def get_latest(self) -> Optional[Snapshot]:
        raise NotImplementedError

    def set_latest(self, snapshot_id: str) -> None:
        """Move the school-wide latest flag onto `snapshot_id` in one atomic write."""

        raise NotImplementedError
