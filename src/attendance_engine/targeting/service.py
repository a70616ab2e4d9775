from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional

from ..core.enums import Role
from ..core.exceptions import DataAccessError
from ..requirements.model import RequirementSet
from ..requirements.repository import RequirementRepository
from ..roster.model import SectionKey
from ..roster.repository import RosterRepository
from ..schedules.model import ScheduleDay
from ..schedules.repository import ScheduleRepository
from .model import TargetedAudience

logger = logging.getLogger(__name__)

MembersOf = Callable[[SectionKey], FrozenSet[str]]


class AudienceResolver:
    """Who is required to attend on a date.

    Lookup failures are logged and, unless a caller asks for ``strict``
    ranges, the affected date resolves to an empty audience.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        requirements: RequirementRepository,
        roster: RosterRepository,
    ):
        self._schedules = schedules
        self._requirements = requirements
        self._roster = roster

    def resolve(self, day: date) -> TargetedAudience:
        try:
            schedule = self._schedules.get_for_date(day)
        except DataAccessError as e:
            logger.warning("schedule lookup failed for %s: %s", day, e)
            return TargetedAudience(day=day)

        if schedule is None or not schedule.is_flag_day:
            return TargetedAudience(day=day, schedule=schedule)

        try:
            requirement = self._requirements.get_for_date(day)
        except DataAccessError as e:
            logger.warning("requirement lookup failed for %s: %s", day, e)
            return TargetedAudience(day=day, schedule=schedule)

        return self._expand(schedule, requirement, self._section_lookup())

    def resolve_range(
        self,
        start: date,
        end: date,
        *,
        college: Optional[str] = None,
        strict: bool = False,
    ) -> Dict[date, TargetedAudience]:
        """Audiences for every flag day in ``start..end``; other dates are omitted.

        With ``strict=True`` a failed lookup raises :class:`DataAccessError`
        instead of narrowing the affected dates to empty audiences.
        """

        schedules = self._flag_days(start, end, college=college, strict=strict)
        if not schedules:
            return {}

        requirements = self._requirements_in(start, end, strict=strict)
        members_of = self._section_lookup()
        return {s.day: self._expand(s, requirements.get(s.day), members_of, strict=strict) for s in schedules}

    def targeted_dates(self, person_id: str, start: date, end: date) -> List[TargetedAudience]:
        """Flag days in ``start..end`` on which ``person_id`` is required, oldest first.

        Section expansion is restricted to the person's own current section, so
        no roster scan is needed. Without a readable profile no date is returned.
        """

        schedules = self._flag_days(start, end)
        if not schedules:
            return []

        try:
            members_of = self._person_lookup(person_id)
        except DataAccessError as e:
            logger.warning("profile lookup failed for %s: %s", person_id, e)
            return []

        requirements = self._requirements_in(start, end)

        out = []
        for s in schedules:
            audience = self._expand(s, requirements.get(s.day), members_of)
            if audience.includes(person_id):
                out.append(audience)
        return out

    def _flag_days(
        self,
        start: date,
        end: date,
        *,
        college: Optional[str] = None,
        strict: bool = False,
    ) -> List[ScheduleDay]:
        try:
            rows = self._schedules.list_range(start=start, end=end, college=college)
        except DataAccessError as e:
            logger.warning("schedule lookup failed for %s..%s: %s", start, end, e)
            if strict:
                raise
            return []
        return sorted((s for s in rows if s.is_flag_day), key=lambda s: s.day)

    def _requirements_in(self, start: date, end: date, *, strict: bool = False) -> Mapping[date, RequirementSet]:
        try:
            return self._requirements.list_range(start=start, end=end)
        except DataAccessError as e:
            logger.warning("requirement lookup failed for %s..%s: %s", start, end, e)
            if strict:
                raise
            return {}

    def _section_lookup(self) -> MembersOf:
        cache: Dict[SectionKey, Optional[FrozenSet[str]]] = {}

        def members_of(section: SectionKey) -> FrozenSet[str]:
            if section not in cache:
                try:
                    members = self._roster.list_section_students(section)
                    cache[section] = frozenset(m.person_id for m in members if m.role == Role.STUDENT)
                except DataAccessError as e:
                    logger.warning("roster lookup failed for %s: %s", section.label(), e)
                    cache[section] = None
            found = cache[section]
            if found is None:
                raise DataAccessError(f"roster unavailable for {section.label()}")
            return found

        return members_of

    def _person_lookup(self, person_id: str) -> MembersOf:
        member = self._roster.get_member(person_id)
        own_section = member.section_key if member and member.role == Role.STUDENT else None

        def members_of(section: SectionKey) -> FrozenSet[str]:
            return frozenset([person_id]) if section == own_section else frozenset()

        return members_of

    @staticmethod
    def _expand(
        schedule: ScheduleDay,
        requirement: Optional[RequirementSet],
        members_of: MembersOf,
        *,
        strict: bool = False,
    ) -> TargetedAudience:
        if requirement is None or requirement.is_empty:
            return TargetedAudience(day=schedule.day, schedule=schedule)

        students = set(requirement.student_ids)
        try:
            for section in sorted(requirement.sections):
                students |= members_of(section)
        except DataAccessError:
            if strict:
                raise
            return TargetedAudience(day=schedule.day, schedule=schedule)

        return TargetedAudience(
            day=schedule.day,
            schedule=schedule,
            student_ids=frozenset(students),
            teacher_ids=frozenset(requirement.teacher_ids),
        )
