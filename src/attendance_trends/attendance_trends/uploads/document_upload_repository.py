from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..core.enums import UploadStatus
from ..database.document_store import DocumentStore
from ..database.paths import SchoolPaths
from .model import Upload
from .repository import UploadRepository


class DocumentUploadRepository(UploadRepository):
    def __init__(self, store: DocumentStore, paths: SchoolPaths):
        self._store = store
        self._paths = paths

    def new_id(self) -> str:
        return uuid.uuid4().hex[:20]

    def get(self, upload_id: str) -> Optional[Upload]:
        doc = self._store.get(self._paths.upload(upload_id))
        return Upload.from_dict(doc.id, doc.data) if doc else None

    def find_by_checksum(self, checksum: str, *, status: Optional[UploadStatus] = None) -> Sequence[Upload]:
        filters = {"checksum": checksum}
        if status is not None:
            filters["status"] = status.value
        docs = self._store.query(self._paths.uploads(), **filters)
        uploads = [Upload.from_dict(d.id, d.data) for d in docs]
        uploads.sort(key=lambda u: u.created_at or "", reverse=True)
        return uploads

    def save(self, upload: Upload) -> None:
        self._store.batch().set(self._paths.upload(upload.upload_id), upload.to_dict()).commit()
