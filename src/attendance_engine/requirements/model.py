from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet

from ..roster.model import SectionKey


@dataclass(frozen=True)
class RequirementSet:
    """Who was declared required on one date, before section expansion."""

    day: date
    student_ids: FrozenSet[str] = field(default_factory=frozenset)
    teacher_ids: FrozenSet[str] = field(default_factory=frozenset)
    sections: FrozenSet[SectionKey] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not (self.student_ids or self.teacher_ids or self.sections)
