from __future__ import annotations

from dataclasses import dataclass

from .document_store import join_path


@dataclass(frozen=True)
class SchoolPaths:
    """Document paths for one school's data."""

    school_id: str

    def school(self) -> str:
        return join_path("schools", self.school_id)

    def snapshots(self) -> str:
        return join_path(self.school(), "snapshots")

    def snapshot(self, snapshot_id: str) -> str:
        return join_path(self.snapshots(), snapshot_id)

    def rows(self, snapshot_id: str) -> str:
        return join_path(self.snapshot(snapshot_id), "rows")

    def row(self, snapshot_id: str, key: str) -> str:
        return join_path(self.rows(snapshot_id), key)

    def uploads(self) -> str:
        return join_path(self.school(), "uploads")

    def upload(self, upload_id: str) -> str:
        return join_path(self.uploads(), upload_id)

    def leaderboards(self) -> str:
        return join_path(self.school(), "leaderboards")

    def leaderboard(self, year: int, term: int) -> str:
        return join_path(self.leaderboards(), f"{int(year)}-T{int(term)}")

    def roster(self) -> str:
        return join_path(self.school(), "roster")

    def roster_entry(self, key: str) -> str:
        return join_path(self.roster(), key)

    def users(self) -> str:
        return join_path(self.school(), "users")

    def user(self, uid: str) -> str:
        return join_path(self.users(), uid)
