from __future__ import annotations

from pathlib import Path

from src.attendance_trends.attendance_trends.database.bootstrap import schema_statements

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_repo_schema_creates_only_the_documents_table():
    statements = schema_statements(SCHEMA_PATH.read_text(encoding="utf-8"))

    assert len(statements) == 1
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS documents")
    assert "data JSON NOT NULL" in statements[0]


def test_database_scoped_statements_and_comments_are_skipped():
    sql = (
        "CREATE DATABASE IF NOT EXISTS other;\n"
        "use other;\n"
        "-- documents live here\n"
        "CREATE TABLE t (id INT);\n"
        "\n"
    )
    assert schema_statements(sql) == ["CREATE TABLE t (id INT)"]
