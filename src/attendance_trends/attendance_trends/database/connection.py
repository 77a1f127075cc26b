from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import mysql.connector


@dataclass(frozen=True)
class MySQLSettings:
    host: str
    port: int
    user: str
    password: str
    database: str
    connection_timeout: int = 10
    charset: str = "utf8mb4"

    @classmethod
    def from_mapping(cls, db_config: Mapping[str, Any]) -> "MySQLSettings":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config.get("password") or ""),
            database=str(db_config["database"]),
            connection_timeout=int(db_config.get("connection_timeout", 10)),
        )


class DatabaseConnection:
    """Connection factory for the document table.

    Note: Each store operation opens a short-lived connection and commits or
    rolls back as one transaction.
    """

    def __init__(self, settings: MySQLSettings):
        self._settings = settings

    @classmethod
    def from_dict(cls, db_config: Mapping[str, Any]) -> "DatabaseConnection":
        return cls(MySQLSettings.from_mapping(db_config))

    @property
    def database(self) -> str:
        return self._settings.database

    def connect(self):
        s = self._settings
        return mysql.connector.connect(
            host=s.host,
            port=s.port,
            user=s.user,
            password=s.password,
            database=s.database,
            connection_timeout=s.connection_timeout,
            charset=s.charset,
            autocommit=False,
        )
