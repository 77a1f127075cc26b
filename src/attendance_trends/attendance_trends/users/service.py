from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import UserProfile
from .repository import UserRepository
from .token_verifier import TokenVerifier


@dataclass(frozen=True)
class Caller:
    """What a request handler knows about who is calling."""

    uid: str
    role: Role
    external_id: Optional[str] = None


class AuthService:
    """Use case: resolve a bearer token to a caller and check role access."""

    def __init__(self, users: UserRepository, verifier: TokenVerifier):
        self._users = users
        self._verifier = verifier

    def authenticate(self, authorization_header: Optional[str]) -> Caller:
        header = (authorization_header or "").strip()
        if not header.startswith("Bearer "):
            raise AuthenticationError("missing bearer token")
        token = header.split(" ", 1)[1].strip()
        if not token:
            raise AuthenticationError("missing bearer token")

        uid = self._verifier.verify(token)
        profile: Optional[UserProfile] = self._users.get_by_uid(uid)
        if not profile:
            raise AuthorizationError("no user profile")
        if profile.suspended:
            raise AuthorizationError("account suspended")
        return Caller(uid=profile.uid, role=profile.role, external_id=profile.external_id)

    @staticmethod
    def authorize(caller: Caller, required: Optional[Role]) -> None:
        """A route for role R admits R and admins."""
        if required is None or caller.role in (required, Role.ADMIN):
            return
        raise AuthorizationError("forbidden")
