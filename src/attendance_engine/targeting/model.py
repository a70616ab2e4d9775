from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Optional

from ..schedules.model import ScheduleDay


@dataclass(frozen=True)
class TargetedAudience:
    """Everyone obligated to attend on one date.

    Students (explicit + section members) and teachers are kept apart because
    the reporting paths differ; a person is counted once per set.
    """

    day: date
    schedule: Optional[ScheduleDay] = None
    student_ids: FrozenSet[str] = field(default_factory=frozenset)
    teacher_ids: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def everyone(self) -> FrozenSet[str]:
        return self.student_ids | self.teacher_ids

    @property
    def is_flag_day(self) -> bool:
        return bool(self.schedule and self.schedule.is_flag_day)

    def includes(self, person_id: str) -> bool:
        return person_id in self.student_ids or person_id in self.teacher_ids

    def __len__(self) -> int:
        return len(self.everyone)
