from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import RosterMember, SectionKey


class RosterRepository(Protocol):
    """Read access to user profiles and class membership.

    Membership is always the *current* one; past dates are evaluated against
    today's sections.
    """

    def get_member(self, person_id: str) -> Optional[RosterMember]:
        raise NotImplementedError

    def list_members(self, person_ids: Sequence[str]) -> Sequence[RosterMember]:
        raise NotImplementedError

    def list_section_students(self, section: SectionKey) -> Sequence[RosterMember]:
        raise NotImplementedError

    def list_students(self, *, college: Optional[str] = None) -> Sequence[RosterMember]:
        raise NotImplementedError

    def list_advisories(self, teacher_id: str) -> Sequence[SectionKey]:
        """Classes a teacher advises, ordered by program."""

        raise NotImplementedError
