from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..roster.model import SectionKey
from .model import ClassCaptain
from .repository import CaptainRepository

_COLUMNS = "program_code, year_name, section_name, captain_user_id, assigned_by, assigned_at"


def _to_captain(r: dict) -> ClassCaptain:
    return ClassCaptain(
        section=SectionKey(r["program_code"], r["year_name"], r["section_name"]),
        captain_user_id=str(r["captain_user_id"]),
        assigned_at=r["assigned_at"],
        assigned_by=str(r["assigned_by"]) if r.get("assigned_by") else None,
    )


class MySQLCaptainRepository(CaptainRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_section(self, section: SectionKey) -> Optional[ClassCaptain]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM class_captains
                WHERE program_code=%s AND year_name=%s AND section_name=%s
                """,
                (section.program, section.year, section.section),
            )
            r = fetchone(cur)
            return _to_captain(r) if r else None

    def get_for_captain(self, captain_user_id: str) -> Optional[ClassCaptain]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM class_captains WHERE captain_user_id=%s LIMIT 1",
                (str(captain_user_id),),
            )
            r = fetchone(cur)
            return _to_captain(r) if r else None

    def upsert(
        self,
        *,
        section: SectionKey,
        captain_user_id: str,
        assigned_by: Optional[str],
        assigned_at: datetime,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_captains(program_code, year_name, section_name, captain_user_id, assigned_by, assigned_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    captain_user_id=VALUES(captain_user_id),
                    assigned_by=VALUES(assigned_by),
                    assigned_at=VALUES(assigned_at)
                """,
                (section.program, section.year, section.section, str(captain_user_id), assigned_by, assigned_at),
            )
