from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

import mysql.connector

from ..core.exceptions import DataAccessError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; commit on success, roll back on error.

    Driver errors surface as :class:`DataAccessError` so services can degrade
    without knowing about mysql-connector.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.warning("database connection failed: %s", e)
        raise DataAccessError(str(e)) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.warning("database operation failed: %s", e)
        raise DataAccessError(str(e)) from e
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


def in_clause(column: str, values: Iterable[object]) -> Tuple[str, Tuple[object, ...]]:
    """Build ``column IN (%s, ...)`` for a non-empty collection of values."""

    params = tuple(values)
    if not params:
        return "1=0", ()
    placeholders = ",".join(["%s"] * len(params))
    return f"{column} IN ({placeholders})", params
