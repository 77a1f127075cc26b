from __future__ import annotations

import pytest

from src.attendance_trends.attendance_trends.core.enums import Role
from src.attendance_trends.attendance_trends.core.exceptions import AuthenticationError, AuthorizationError
from src.attendance_trends.attendance_trends.users.model import UserProfile
from src.attendance_trends.attendance_trends.users.service import AuthService, Caller
from src.attendance_trends.attendance_trends.users.token_verifier import SignedTokenVerifier


class FakeUserRepository:
    def __init__(self, profiles):
        self._profiles = {p.uid: p for p in profiles}

    def get_by_uid(self, uid):
        return self._profiles.get(uid)

    def upsert(self, profile):
        self._profiles[profile.uid] = profile


@pytest.fixture
def verifier():
    return SignedTokenVerifier("secret", max_age_seconds=60)


@pytest.fixture
def auth(verifier):
    users = FakeUserRepository(
        [
            UserProfile(uid="t1", role=Role.TEACHER),
            UserProfile(uid="s1", role=Role.STUDENT, external_id="S100"),
            UserProfile(uid="x1", role=Role.TEACHER, suspended=True),
        ]
    )
    return AuthService(users, verifier)


def test_valid_token_resolves_profile(auth, verifier):
    caller = auth.authenticate(f"Bearer {verifier.issue('s1')}")
    assert caller == Caller(uid="s1", role=Role.STUDENT, external_id="S100")


@pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer ", "Bearer not-a-token"])
def test_missing_or_malformed_token(auth, header):
    with pytest.raises(AuthenticationError):
        auth.authenticate(header)


def test_token_signed_with_other_secret_is_rejected(auth):
    other = SignedTokenVerifier("other", max_age_seconds=60)
    with pytest.raises(AuthenticationError):
        auth.authenticate(f"Bearer {other.issue('t1')}")


def test_unknown_or_suspended_profile_is_forbidden(auth, verifier):
    with pytest.raises(AuthorizationError):
        auth.authenticate(f"Bearer {verifier.issue('nobody')}")
    with pytest.raises(AuthorizationError):
        auth.authenticate(f"Bearer {verifier.issue('x1')}")


@pytest.mark.parametrize(
    "role,required,allowed",
    [
        (Role.ADMIN, Role.TEACHER, True),
        (Role.ADMIN, Role.STUDENT, True),
        (Role.TEACHER, Role.TEACHER, True),
        (Role.TEACHER, Role.ADMIN, False),
        (Role.STUDENT, Role.TEACHER, False),
        (Role.STUDENT, None, True),
    ],
)
def test_role_check_admits_role_and_admin(role, required, allowed):
    caller = Caller(uid="u", role=role)
    if allowed:
        AuthService.authorize(caller, required)
    else:
        with pytest.raises(AuthorizationError):
            AuthService.authorize(caller, required)
