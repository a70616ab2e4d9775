from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..roster.model import SectionKey
from ..roster.repository import RosterRepository
from .model import ClassCaptain
from .repository import CaptainRepository


class CaptainService:
    def __init__(self, captains: CaptainRepository, roster: RosterRepository):
        self._captains = captains
        self._roster = roster

    def assign(
        self,
        *,
        current_role: Optional[Role],
        section: SectionKey,
        captain_user_id: str,
        assigned_by: Optional[str],
        now: datetime,
    ) -> ClassCaptain:
        """Make ``captain_user_id`` the captain of ``section``.

        Running it again with the same arguments leaves the same row behind.
        """

        if current_role is None or not (current_role == Role.TEACHER or current_role.is_admin):
            raise AuthorizationError("Only advisers and admins can assign class captains")

        captain_user_id = require_non_empty(captain_user_id, "Captain")
        members = {m.person_id for m in self._roster.list_section_students(section)}
        if captain_user_id not in members:
            raise ValidationError("Captain must be a student of the class")

        self._captains.upsert(
            section=section,
            captain_user_id=captain_user_id,
            assigned_by=assigned_by,
            assigned_at=now,
        )
        return ClassCaptain(section=section, captain_user_id=captain_user_id, assigned_at=now, assigned_by=assigned_by)

    def captain_for(self, section: SectionKey) -> Optional[ClassCaptain]:
        return self._captains.get_for_section(section)

    def class_of(self, captain_user_id: str) -> Optional[SectionKey]:
        captain = self._captains.get_for_captain(captain_user_id)
        return captain.section if captain else None
