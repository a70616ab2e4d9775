from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..roster.model import SectionKey
from .model import ClassCaptain


class CaptainRepository(Protocol):
    def get_for_section(self, section: SectionKey) -> Optional[ClassCaptain]:
        raise NotImplementedError

    def get_for_captain(self, captain_user_id: str) -> Optional[ClassCaptain]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        section: SectionKey,
        captain_user_id: str,
        assigned_by: Optional[str],
        assigned_at: datetime,
    ) -> None:
        """One captain per class; re-assigning replaces the row."""

        raise NotImplementedError
