from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import UploadStatus
from .model import Upload


class UploadRepository(Protocol):
    def new_id(self) -> str:
        raise NotImplementedError

    def get(self, upload_id: str) -> Optional[Upload]:
        raise NotImplementedError

    def find_by_checksum(self, checksum: str, *, status: Optional[UploadStatus] = None) -> Sequence[Upload]:
        raise NotImplementedError

    def save(self, upload: Upload) -> None:
        raise NotImplementedError
