from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Mapping

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..roster.model import SectionKey
from .model import RequirementSet
from .repository import RequirementRepository


class MySQLRequirementRepository(RequirementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, day: date) -> RequirementSet:
        return self.list_range(start=day, end=day).get(day) or RequirementSet(day=day)

    def list_range(self, *, start: date, end: date) -> Mapping[date, RequirementSet]:
        students: dict[date, set[str]] = defaultdict(set)
        teachers: dict[date, set[str]] = defaultdict(set)
        sections: dict[date, set[SectionKey]] = defaultdict(set)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT date, student_id FROM attendance_schedule_required_students WHERE date BETWEEN %s AND %s",
                (start, end),
            )
            for r in fetchall(cur):
                students[r["date"]].add(str(r["student_id"]))

            cur.execute(
                "SELECT date, teacher_id FROM attendance_schedule_required_teachers WHERE date BETWEEN %s AND %s",
                (start, end),
            )
            for r in fetchall(cur):
                teachers[r["date"]].add(str(r["teacher_id"]))

            cur.execute(
                """
                SELECT date, program_code, year_name, section_name
                FROM attendance_schedule_required_sections
                WHERE date BETWEEN %s AND %s
                """,
                (start, end),
            )
            for r in fetchall(cur):
                sections[r["date"]].add(SectionKey(r["program_code"], r["year_name"], r["section_name"]))

        days = set(students) | set(teachers) | set(sections)
        return {
            d: RequirementSet(
                day=d,
                student_ids=frozenset(students.get(d, ())),
                teacher_ids=frozenset(teachers.get(d, ())),
                sections=frozenset(sections.get(d, ())),
            )
            for d in days
        }
