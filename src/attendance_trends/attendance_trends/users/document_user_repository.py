from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.document_store import DocumentStore
from ..database.paths import SchoolPaths
from .model import UserProfile
from .repository import UserRepository


class DocumentUserRepository(UserRepository):
    def __init__(self, store: DocumentStore, paths: SchoolPaths):
        self._store = store
        self._paths = paths

    def get_by_uid(self, uid: str) -> Optional[UserProfile]:
        doc = self._store.get(self._paths.user(uid))
        if not doc:
            return None
        try:
            role = Role(str(doc.data.get("role") or Role.STUDENT.value))
        except ValueError:
            return None
        return UserProfile(
            uid=uid,
            role=role,
            external_id=doc.data.get("externalId"),
            email=doc.data.get("email"),
            suspended=bool(doc.data.get("suspended", False)),
        )

    def upsert(self, profile: UserProfile) -> None:
        self._store.batch().set(
            self._paths.user(profile.uid),
            {
                "role": profile.role.value,
                "externalId": profile.external_id,
                "email": profile.email,
                "suspended": profile.suspended,
            },
            merge=True,
        ).commit()
