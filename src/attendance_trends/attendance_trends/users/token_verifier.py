from __future__ import annotations

from typing import Protocol

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.exceptions import AuthenticationError

TOKEN_SALT = "attendance-trends-bearer"


class TokenVerifier(Protocol):
    def verify(self, token: str) -> str:
        """Return the caller uid for a valid token; raise AuthenticationError otherwise."""

        raise NotImplementedError


class SignedTokenVerifier(TokenVerifier):
    """Bearer tokens signed with the app secret (itsdangerous), carrying the uid."""

    def __init__(self, secret_key: str, *, max_age_seconds: int):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)
        self._max_age = int(max_age_seconds)

    def issue(self, uid: str) -> str:
        return self._serializer.dumps({"uid": uid})

    def verify(self, token: str) -> str:
        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired:
            raise AuthenticationError("token expired")
        except BadSignature:
            raise AuthenticationError("invalid token")
        uid = payload.get("uid") if isinstance(payload, dict) else None
        if not uid:
            raise AuthenticationError("invalid token")
        return str(uid)
