from __future__ import annotations

from typing import Optional, Protocol

from .model import UserProfile


class UserRepository(Protocol):
    def get_by_uid(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def upsert(self, profile: UserProfile) -> None:
        raise NotImplementedError
