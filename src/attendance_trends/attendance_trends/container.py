from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .core.constants import DEFAULT_EXCLUDED_ROLL_CLASSES, DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.connection import DatabaseConnection
from .database.document_store import DocumentStore
from .database.memory_document_store import InMemoryDocumentStore
from .database.mysql_document_store import MySQLDocumentStore
from .database.paths import SchoolPaths
from .ingestion.locks import TermLockRegistry
from .ingestion.service import IngestionService
from .leaderboard.document_leaderboard_repository import DocumentLeaderboardRepository
from .leaderboard.service import LeaderboardService
from .roster.document_roster_repository import DocumentRosterRepository
from .snapshots.document_snapshot_repository import DocumentSnapshotRepository
from .snapshots.query_service import SnapshotQueryService
from .snapshots.service import SnapshotService
from .students.service import StudentSummaryService
from .trends.service import TrendService
from .uploads.document_upload_repository import DocumentUploadRepository
from .users.document_user_repository import DocumentUserRepository
from .users.service import AuthService
from .users.token_verifier import SignedTokenVerifier


@dataclass(frozen=True)
class Container:
    store: DocumentStore
    paths: SchoolPaths

    snapshots_repo: DocumentSnapshotRepository
    uploads_repo: DocumentUploadRepository
    leaderboards_repo: DocumentLeaderboardRepository
    roster_repo: DocumentRosterRepository
    users_repo: DocumentUserRepository

    token_verifier: SignedTokenVerifier
    auth_service: AuthService
    snapshot_service: SnapshotService
    trend_service: TrendService
    leaderboard_service: LeaderboardService
    ingestion_service: IngestionService
    snapshot_query_service: SnapshotQueryService
    student_service: StudentSummaryService


def build_store(*, backend: str, db_config: Optional[dict] = None) -> DocumentStore:
    backend = (backend or "mysql").lower()
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql store backend")
        return MySQLDocumentStore(DatabaseConnection.from_dict(db_config))
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def build_container(
    *,
    store: DocumentStore,
    school_id: str,
    secret_key: str,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    excluded_roll_classes: Iterable[str] = DEFAULT_EXCLUDED_ROLL_CLASSES,
) -> Container:
    paths = SchoolPaths(school_id)

    snapshots_repo = DocumentSnapshotRepository(store, paths)
    uploads_repo = DocumentUploadRepository(store, paths)
    leaderboards_repo = DocumentLeaderboardRepository(store, paths)
    roster_repo = DocumentRosterRepository(store, paths)
    users_repo = DocumentUserRepository(store, paths)

    token_verifier = SignedTokenVerifier(secret_key, max_age_seconds=token_max_age_seconds)
    auth_service = AuthService(users_repo, token_verifier)
    snapshot_service = SnapshotService(snapshots_repo)
    trend_service = TrendService(snapshots_repo)
    leaderboard_service = LeaderboardService(
        snapshots_repo,
        roster_repo,
        leaderboards_repo,
        excluded_roll_classes=excluded_roll_classes,
    )
    ingestion_service = IngestionService(
        uploads_repo,
        snapshots_repo,
        snapshot_service,
        trend_service,
        leaderboard_service,
        locks=TermLockRegistry(),
    )

    return Container(
        store=store,
        paths=paths,
        snapshots_repo=snapshots_repo,
        uploads_repo=uploads_repo,
        leaderboards_repo=leaderboards_repo,
        roster_repo=roster_repo,
        users_repo=users_repo,
        token_verifier=token_verifier,
        auth_service=auth_service,
        snapshot_service=snapshot_service,
        trend_service=trend_service,
        leaderboard_service=leaderboard_service,
        ingestion_service=ingestion_service,
        snapshot_query_service=SnapshotQueryService(snapshots_repo),
        student_service=StudentSummaryService(snapshots_repo, roster_repo),
    )
