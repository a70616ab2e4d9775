from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True, order=True)
class SectionKey:
    """A class: program + year level + section."""

    program: str
    year: str
    section: str

    def __post_init__(self):
        for name in ("program", "year", "section"):
            object.__setattr__(self, name, str(getattr(self, name)).strip())

    def label(self) -> str:
        return f"{self.program} {self.year}-{self.section}"


@dataclass(frozen=True)
class RosterMember:
    """A user profile as seen by the engine (no credentials, no contact chrome)."""

    person_id: str
    role: Role
    full_name: str = ""
    email: Optional[str] = None
    program: Optional[str] = None
    year: Optional[str] = None
    section: Optional[str] = None

    @property
    def section_key(self) -> Optional[SectionKey]:
        if not (self.program and self.year and self.section):
            return None
        return SectionKey(self.program, self.year, self.section)
