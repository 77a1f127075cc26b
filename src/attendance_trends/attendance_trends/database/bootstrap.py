"""Schema setup for the `documents` table backing MySQLDocumentStore."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import mysql.connector

from .connection import DatabaseConnection, MySQLSettings
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("documents",)

# schema.sql names a database for manual use; the configured DB_NAME wins.
_DATABASE_SCOPED = re.compile(r"^(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def schema_statements(sql: str) -> list[str]:
    """DDL statements of schema.sql that run inside the configured database."""
    statements = []
    for chunk in sql.split(";"):
        stmt = "\n".join(line for line in chunk.splitlines() if not line.strip().startswith("--")).strip()
        if stmt and not _DATABASE_SCOPED.match(stmt):
            statements.append(stmt)
    return statements


def ensure_database_exists(db_config: dict) -> None:
    settings = MySQLSettings.from_mapping(db_config)
    conn = mysql.connector.connect(
        host=settings.host,
        port=settings.port,
        user=settings.user,
        password=settings.password,
        connection_timeout=settings.connection_timeout,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{settings.database}` "
            f"CHARACTER SET {settings.charset} COLLATE {settings.charset}_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    statements = schema_statements(Path(schema_path).read_text(encoding="utf-8"))
    if not statements:
        raise ValueError(f"No table statements found in {schema_path}")

    ensure_database_exists(db_config)
    with db_cursor(DatabaseConnection.from_dict(db_config), dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)

    missing = [t for t in REQUIRED_TABLES if t not in list_tables(db_config)]
    if missing:
        raise RuntimeError(f"Schema applied but tables are missing: {', '.join(missing)}")
    logger.info("Applied %d schema statements to %s", len(statements), db_config.get("database"))


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(DatabaseConnection.from_dict(db_config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
