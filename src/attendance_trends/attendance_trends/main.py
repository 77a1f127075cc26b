from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http_errors import register_error_handlers
from .common.logging_setup import configure_logging
from .container import Container, build_container, build_store
from .core.constants import DEFAULT_EXCLUDED_ROLL_CLASSES, DEFAULT_MAX_UPLOAD_BYTES, DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.bootstrap import apply_schema, list_tables
from .database.document_store import DocumentStore
from .ingestion.controller import register as register_ingestion
from .leaderboard.controller import register as register_leaderboard
from .snapshots.controller import register as register_snapshots
from .students.controller import register as register_students

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, store: Optional[DocumentStore] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES))

    backend = str(getattr(settings, "STORE_BACKEND", "mysql"))
    db_config = getattr(settings, "DB_CONFIG", None)
    school_id = str(getattr(settings, "SCHOOL_ID", "default"))
    logger.info("Starting with settings=%s store=%s school=%s", settings_module, backend, school_id)

    if store is None and backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container: Container = build_container(
        store=store or build_store(backend=backend, db_config=db_config),
        school_id=school_id,
        secret_key=app.secret_key,
        token_max_age_seconds=int(getattr(settings, "TOKEN_MAX_AGE_SECONDS", DEFAULT_TOKEN_MAX_AGE_SECONDS)),
        excluded_roll_classes=getattr(settings, "EXCLUDED_ROLL_CLASSES", DEFAULT_EXCLUDED_ROLL_CLASSES),
    )
    app.extensions["attendance_trends"] = container

    register_error_handlers(app)

    @app.route("/healthz", endpoint="healthz")
    def healthz():
        return "ok", 200

    register_ingestion(app, container)
    register_snapshots(app, container)
    register_leaderboard(app, container)
    register_students(app, container)

    return app
