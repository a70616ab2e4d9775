from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.timewindow import parse_minutes
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ScheduleDay
from .repository import ScheduleRepository


def _to_schedule(r: dict) -> ScheduleDay:
    return ScheduleDay(
        day=r["date"],
        is_flag_day=bool(r.get("is_flag_day")),
        on_time_end_minute=parse_minutes(r.get("on_time_end")),
        attendance_end_minute=parse_minutes(r.get("attendance_end")),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, day: date) -> Optional[ScheduleDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT date, is_flag_day, on_time_end, attendance_end
                FROM attendance_schedules
                WHERE date=%s
                """,
                (day,),
            )
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_range(self, *, start: date, end: date, college: Optional[str] = None) -> Sequence[ScheduleDay]:
        clauses = ["date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if college:
            clauses.append("college_code=%s")
            params.append(college)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT date, is_flag_day, on_time_end, attendance_end
                FROM attendance_schedules
                WHERE {where}
                ORDER BY date ASC
                """,
                tuple(params),
            )
            return [_to_schedule(r) for r in fetchall(cur)]
