"""Document store abstraction.

Documents live at slash-separated paths that alternate collection and id
segments (``schools/default/snapshots/abc123``). A batch groups at most
``MAX_BATCH_OPERATIONS`` writes and is applied atomically by the backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

from ..core.constants import MAX_BATCH_OPERATIONS
from ..core.exceptions import BatchLimitExceeded


def join_path(*segments: str) -> str:
    return "/".join(str(s).strip("/") for s in segments if str(s).strip("/"))


def split_path(path: str) -> tuple[str, str]:
    """Return (collection_path, doc_id) for a document path."""
    collection, _, doc_id = path.rpartition("/")
    if not collection or not doc_id:
        raise ValueError(f"Not a document path: {path!r}")
    return collection, doc_id


@dataclass(frozen=True)
class Document:
    path: str
    data: dict[str, Any]

    @property
    def id(self) -> str:
        return split_path(self.path)[1]


@dataclass(frozen=True)
class WriteOp:
    kind: str  # "set" | "delete"
    path: str
    data: Optional[dict[str, Any]] = None
    merge: bool = False


@dataclass
class WriteBatch(ABC):
    """Collects writes; `commit()` hands them to the backend as one unit."""

    limit: int = MAX_BATCH_OPERATIONS
    ops: list[WriteOp] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ops)

    @property
    def is_full(self) -> bool:
        return len(self.ops) >= self.limit

    def set(self, path: str, data: dict[str, Any], *, merge: bool = False) -> "WriteBatch":
        self._append(WriteOp(kind="set", path=path, data=dict(data), merge=merge))
        return self

    def delete(self, path: str) -> "WriteBatch":
        self._append(WriteOp(kind="delete", path=path))
        return self

    def _append(self, op: WriteOp) -> None:
        if len(self.ops) >= self.limit:
            raise BatchLimitExceeded(f"A write batch holds at most {self.limit} operations")
        split_path(op.path)
        self.ops.append(op)

    def commit(self) -> None:
        if not self.ops:
            return
        self._apply(list(self.ops))
        self.ops.clear()

    @abstractmethod
    def _apply(self, ops: Sequence[WriteOp]) -> None:
        raise NotImplementedError


class DocumentStore(Protocol):
    def get(self, path: str) -> Optional[Document]:
        raise NotImplementedError

    def list(self, collection: str) -> Sequence[Document]:
        raise NotImplementedError

    def query(self, collection: str, **equals: Any) -> Sequence[Document]:
        """Documents of `collection` whose top-level fields equal every given value."""

        raise NotImplementedError

    def batch(self) -> WriteBatch:
        raise NotImplementedError


def merge_data(existing: Optional[dict[str, Any]], op: WriteOp) -> dict[str, Any]:
    """Resulting document body after applying a set op (top-level merge only)."""
    if op.merge and existing:
        merged = dict(existing)
        merged.update(op.data or {})
        return merged
    return dict(op.data or {})


def write_in_batches(store: DocumentStore, ops: Sequence[WriteOp]) -> int:
    """Commit `ops` in sequential batches of at most the batch cap.

    Each batch is committed on its own; a failure leaves earlier batches persisted.
    Returns the number of batches committed.
    """
    committed = 0
    batch = store.batch()
    for op in ops:
        if batch.is_full:
            batch.commit()
            committed += 1
            batch = store.batch()
        if op.kind == "delete":
            batch.delete(op.path)
        else:
            batch.set(op.path, op.data or {}, merge=op.merge)
    if len(batch):
        batch.commit()
        committed += 1
    return committed
