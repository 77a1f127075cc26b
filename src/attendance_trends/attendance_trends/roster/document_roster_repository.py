from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence

from ..database.document_store import DocumentStore, WriteOp, write_in_batches
from ..database.paths import SchoolPaths
from ..ingestion.csv_normalizer import sanitize_external_id
from .model import RosterEntry
from .repository import RosterRepository


class DocumentRosterRepository(RosterRepository):
    def __init__(self, store: DocumentStore, paths: SchoolPaths):
        self._store = store
        self._paths = paths

    def get(self, external_id: str) -> Optional[RosterEntry]:
        doc = self._store.get(self._paths.roster_entry(sanitize_external_id(external_id)))
        if not doc:
            return None
        return RosterEntry(
            external_id=str(doc.data.get("externalId") or external_id),
            roll_class=str(doc.data.get("rollClass") or ""),
            email=doc.data.get("email"),
        )

    def student_counts(self) -> dict[str, int]:
        counts: Counter[str] = Counter()
        for doc in self._store.list(self._paths.roster()):
            roll_class = str(doc.data.get("rollClass") or "").strip()
            if roll_class:
                counts[roll_class] += 1
        return dict(counts)

    def upsert_many(self, entries: Sequence[RosterEntry]) -> int:
        ops = [
            WriteOp(
                kind="set",
                path=self._paths.roster_entry(sanitize_external_id(e.external_id)),
                data={"externalId": e.external_id, "rollClass": e.roll_class, "email": e.email},
                merge=True,
            )
            for e in entries
            if e.external_id.strip()
        ]
        write_in_batches(self._store, ops)
        return len(ops)
