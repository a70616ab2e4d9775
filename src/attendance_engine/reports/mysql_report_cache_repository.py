from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import CachedReport
from .repository import ReportCacheRepository


class MySQLReportCacheRepository(ReportCacheRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, scope: str, year: int, month: int, payload: str, generated_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_report_cache(scope, year, month, payload, generated_at)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE payload=VALUES(payload), generated_at=VALUES(generated_at)
                """,
                (scope, int(year), int(month), payload, generated_at),
            )

    def get(self, *, scope: str, year: int, month: int) -> Optional[CachedReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT scope, year, month, payload, generated_at
                FROM attendance_report_cache
                WHERE scope=%s AND year=%s AND month=%s
                """,
                (scope, int(year), int(month)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CachedReport(
                scope=r["scope"],
                year=int(r["year"]),
                month=int(r["month"]),
                payload=r["payload"],
                generated_at=r["generated_at"],
            )
