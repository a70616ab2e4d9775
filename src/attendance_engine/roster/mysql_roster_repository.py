from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import RosterMember, SectionKey
from .repository import RosterRepository

logger = logging.getLogger(__name__)

_PROFILE_COLUMNS = "id, role, first_name, middle_name, last_name, email, program, year, section"


def _full_name(r: dict) -> str:
    parts = [r.get("first_name"), r.get("middle_name"), r.get("last_name")]
    return " ".join(p.strip() for p in parts if p and p.strip())


def _to_member(r: dict) -> Optional[RosterMember]:
    try:
        role = Role(str(r.get("role") or "").lower())
    except ValueError:
        logger.debug("skipping profile %s with unknown role %r", r.get("id"), r.get("role"))
        return None

    return RosterMember(
        person_id=str(r["id"]),
        role=role,
        full_name=_full_name(r),
        email=r.get("email"),
        program=(r.get("program") or "").strip() or None,
        year=(str(r["year"]).strip() if r.get("year") is not None else None) or None,
        section=(r.get("section") or "").strip() or None,
    )


def _to_members(rows: list[dict]) -> list[RosterMember]:
    return [m for m in (_to_member(r) for r in rows) if m is not None]


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_member(self, person_id: str) -> Optional[RosterMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROFILE_COLUMNS} FROM user_profiles WHERE id=%s", (str(person_id),))
            r = fetchone(cur)
            return _to_member(r) if r else None

    def list_members(self, person_ids: Sequence[str]) -> Sequence[RosterMember]:
        if not person_ids:
            return []
        clause, params = in_clause("id", [str(p) for p in person_ids])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROFILE_COLUMNS} FROM user_profiles WHERE {clause}", params)
            return _to_members(fetchall(cur))

    def list_section_students(self, section: SectionKey) -> Sequence[RosterMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PROFILE_COLUMNS}
                FROM user_profiles
                WHERE role='student' AND program=%s AND year=%s AND section=%s
                ORDER BY last_name ASC, first_name ASC
                """,
                (section.program.strip(), section.year.strip(), section.section.strip()),
            )
            return _to_members(fetchall(cur))

    def list_students(self, *, college: Optional[str] = None) -> Sequence[RosterMember]:
        clauses = ["role='student'"]
        params: list[object] = []
        if college:
            clauses.append("college=%s")
            params.append(college)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PROFILE_COLUMNS}
                FROM user_profiles
                WHERE {where}
                ORDER BY last_name ASC, first_name ASC
                """,
                tuple(params),
            )
            return _to_members(fetchall(cur))

    def list_advisories(self, teacher_id: str) -> Sequence[SectionKey]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT program_code, year_name, section_name
                FROM advisory_assignments
                WHERE teacher_id=%s
                ORDER BY program_code ASC, year_name ASC, section_name ASC
                """,
                (str(teacher_id),),
            )
            return [SectionKey(r["program_code"], r["year_name"], r["section_name"]) for r in fetchall(cur)]
