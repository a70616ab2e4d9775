from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..roster.model import SectionKey


@dataclass(frozen=True)
class ClassCaptain:
    section: SectionKey
    captain_user_id: str
    assigned_at: datetime
    assigned_by: Optional[str] = None
