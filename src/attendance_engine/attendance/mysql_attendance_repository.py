from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.datetime_utils import day_bounds
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=str(r["id"]),
        person_id=str(r["user_id"]),
        created_at=r["created_at"],
        verified=bool(r.get("verified")),
        method=r.get("method"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_person(self, person_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        return self.list_for_people([person_id], start=start, end=end)

    def list_for_people(self, person_ids: Sequence[str], *, start: date, end: date) -> Sequence[AttendanceRecord]:
        if not person_ids:
            return []

        lower, _ = day_bounds(start)
        _, upper = day_bounds(end)
        clause, id_params = in_clause("user_id", [str(p) for p in person_ids])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, user_id, created_at, verified, method
                FROM attendance_records
                WHERE {clause} AND created_at >= %s AND created_at < %s
                ORDER BY created_at ASC
                """,
                id_params + (lower, upper),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_recent_for_person(self, person_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, created_at, verified, method
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (str(person_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]
