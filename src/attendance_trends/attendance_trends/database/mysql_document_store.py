from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .connection import DatabaseConnection
from .document_store import Document, WriteBatch, WriteOp, merge_data, split_path
from .mysql_base import db_cursor, fetchall, fetchone

logger = logging.getLogger(__name__)


def _load(raw) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        return json.loads(raw)
    return dict(raw)


@dataclass
class _MySQLBatch(WriteBatch):
    store: Optional["MySQLDocumentStore"] = None

    def _apply(self, ops: Sequence[WriteOp]) -> None:
        self.store._apply(ops)


class MySQLDocumentStore:
    """Document store over a single `documents` table (one JSON body per path).

    Each batch runs in one transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, path: str) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT path, data FROM documents WHERE path=%s", (path,))
            r = fetchone(cur)
            if not r:
                return None
            return Document(path=r["path"], data=_load(r["data"]))

    def list(self, collection: str) -> Sequence[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT path, data FROM documents WHERE collection=%s ORDER BY doc_id ASC",
                (collection,),
            )
            return [Document(path=r["path"], data=_load(r["data"])) for r in fetchall(cur)]

    def query(self, collection: str, **equals: Any) -> Sequence[Document]:
        clauses = ["collection=%s"]
        params: list[object] = [collection]
        for key, value in equals.items():
            clauses.append("JSON_EXTRACT(data, %s) = CAST(%s AS JSON)")
            params.append(f"$.{key}")
            params.append(json.dumps(value))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT path, data FROM documents WHERE {where} ORDER BY doc_id ASC",
                tuple(params),
            )
            return [Document(path=r["path"], data=_load(r["data"])) for r in fetchall(cur)]

    def batch(self) -> WriteBatch:
        return _MySQLBatch(store=self)

    def _apply(self, ops: Sequence[WriteOp]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for op in ops:
                collection, doc_id = split_path(op.path)
                if op.kind == "delete":
                    cur.execute("DELETE FROM documents WHERE path=%s", (op.path,))
                    continue

                existing = None
                if op.merge:
                    cur.execute("SELECT data FROM documents WHERE path=%s FOR UPDATE", (op.path,))
                    r = fetchone(cur)
                    existing = _load(r["data"]) if r else None

                body = json.dumps(merge_data(existing, op))
                cur.execute(
                    """
                    INSERT INTO documents(path, collection, doc_id, data)
                    VALUES(%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE data=VALUES(data), updated_at=CURRENT_TIMESTAMP
                    """,
                    (op.path, collection, doc_id, body),
                )
        logger.debug("Committed batch of %d document writes", len(ops))
