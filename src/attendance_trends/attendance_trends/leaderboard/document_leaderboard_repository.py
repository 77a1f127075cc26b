from __future__ import annotations

from typing import Optional

from ..database.document_store import DocumentStore
from ..database.paths import SchoolPaths
from .model import TermLeaderboard
from .repository import LeaderboardRepository


class DocumentLeaderboardRepository(LeaderboardRepository):
    def __init__(self, store: DocumentStore, paths: SchoolPaths):
        self._store = store
        self._paths = paths

    def get(self, *, year: int, term: int) -> Optional[TermLeaderboard]:
        doc = self._store.get(self._paths.leaderboard(year, term))
        return TermLeaderboard.from_dict(doc.data) if doc else None

    def replace(self, board: TermLeaderboard) -> None:
        self._store.batch().set(self._paths.leaderboard(board.year, board.term), board.to_dict(), merge=False).commit()
