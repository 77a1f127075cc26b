from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.attendance_trends.attendance_trends.container import build_container
from src.attendance_trends.attendance_trends.core.enums import Role
from src.attendance_trends.attendance_trends.database.memory_document_store import InMemoryDocumentStore
from src.attendance_trends.attendance_trends.main import create_app
from src.attendance_trends.attendance_trends.users.model import UserProfile


@pytest.fixture
def fixed_now():
    return datetime(2025, 8, 4, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def container(store):
    return build_container(store=store, school_id="test-school", secret_key="test-secret")


@pytest.fixture
def app(store):
    app = create_app(settings_module="config.testing", store=store)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(app):
    container = app.extensions["attendance_trends"]

    def _make(uid: str, role: Role, external_id=None) -> dict:
        container.users_repo.upsert(UserProfile(uid=uid, role=role, external_id=external_id))
        return {"Authorization": f"Bearer {container.token_verifier.issue(uid)}"}

    return _make


@pytest.fixture
def csv_bytes():
    def _build(rows, header=("Student ID", "Roll Class", "% Present")) -> bytes:
        lines = [",".join(header)]
        lines.extend(",".join(str(v) for v in r) for r in rows)
        return ("\n".join(lines) + "\n").encode("utf-8")

    return _build
