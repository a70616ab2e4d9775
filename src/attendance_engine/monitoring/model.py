from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Tuple

from ..core.enums import LiveStatus
from ..roster.model import SectionKey
from ..schedules.model import ScheduleDay


@dataclass(frozen=True)
class MemberStatus:
    """``status`` is ``None`` when the member is not required today."""

    person_id: str
    full_name: str
    email: Optional[str]
    status: Optional[LiveStatus]


@dataclass(frozen=True)
class ClassBoard:
    section: SectionKey
    day: date
    schedule: Optional[ScheduleDay]
    members: Tuple[MemberStatus, ...] = ()

    def count(self, status: LiveStatus) -> int:
        return sum(1 for m in self.members if m.status == status)


@dataclass(frozen=True)
class ClassCount:
    section: SectionKey
    verified: int
    total: int


@dataclass(frozen=True)
class DailyOverview:
    """Admin view of today's required attendees.

    ``verified``/``total`` are ``None`` when today is not a flag day or the
    roster could not be read.
    """

    day: date
    schedule: Optional[ScheduleDay]
    verified: Optional[int] = None
    total: Optional[int] = None
    teachers: Tuple[MemberStatus, ...] = ()
    students: Dict[str, Dict[str, Dict[str, Tuple[MemberStatus, ...]]]] = field(default_factory=dict)
