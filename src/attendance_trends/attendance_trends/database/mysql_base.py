from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import QuotaExceeded, StoreUnavailable
from .connection import DatabaseConnection

_QUOTA_ERRNOS = {errorcode.ER_CON_COUNT_ERROR, errorcode.ER_USER_LIMIT_REACHED}


def translate_mysql_error(exc: mysql.connector.Error) -> Exception:
    """Map connector errors onto the retryable store errors callers understand."""
    if getattr(exc, "errno", None) in _QUOTA_ERRNOS:
        return QuotaExceeded(str(exc))
    return StoreUnavailable(str(exc))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise translate_mysql_error(e) from e
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise translate_mysql_error(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
