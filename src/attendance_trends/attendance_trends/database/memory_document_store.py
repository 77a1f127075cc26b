from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .document_store import Document, WriteBatch, WriteOp, merge_data, split_path


@dataclass
class _MemoryBatch(WriteBatch):
    store: Optional["InMemoryDocumentStore"] = None

    def _apply(self, ops: Sequence[WriteOp]) -> None:
        self.store._apply(ops)


class InMemoryDocumentStore:
    """Process-local document store used by development and tests.

    Batches are applied under a lock, so each one is all-or-nothing for readers.
    """

    def __init__(self):
        self._docs: dict[str, dict[str, Any]] = {}
        self._lock = threading.RLock()
        self.committed_batches = 0

    def get(self, path: str) -> Optional[Document]:
        with self._lock:
            data = self._docs.get(path)
            return Document(path=path, data=copy.deepcopy(data)) if data is not None else None

    def list(self, collection: str) -> Sequence[Document]:
        with self._lock:
            out = []
            for path in sorted(self._docs):
                parent, _ = split_path(path)
                if parent == collection:
                    out.append(Document(path=path, data=copy.deepcopy(self._docs[path])))
            return out

    def query(self, collection: str, **equals: Any) -> Sequence[Document]:
        return [
            d for d in self.list(collection)
            if all(k in d.data and d.data[k] == v for k, v in equals.items())
        ]

    def batch(self) -> WriteBatch:
        return _MemoryBatch(store=self)

    def _apply(self, ops: Sequence[WriteOp]) -> None:
        with self._lock:
            staged = dict(self._docs)
            for op in ops:
                if op.kind == "delete":
                    staged.pop(op.path, None)
                else:
                    staged[op.path] = copy.deepcopy(merge_data(staged.get(op.path), op))
            self._docs = staged
            self.committed_batches += 1
