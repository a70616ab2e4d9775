from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Sequence

from ..classification.service import LiveStatusService
from ..common.datetime_utils import to_local
from ..core.enums import LiveStatus
from ..core.exceptions import DataAccessError
from ..roster.model import RosterMember, SectionKey
from ..roster.repository import RosterRepository
from ..targeting.service import AudienceResolver
from .model import ClassBoard, ClassCount, DailyOverview, MemberStatus

logger = logging.getLogger(__name__)

_ATTENDED = (LiveStatus.PRESENT, LiveStatus.LATE)


class MonitoringService:
    """Live boards for captains, advisers and admins."""

    def __init__(self, resolver: AudienceResolver, live: LiveStatusService, roster: RosterRepository):
        self._resolver = resolver
        self._live = live
        self._roster = roster

    def class_status(self, section: SectionKey, *, now: datetime) -> ClassBoard:
        day = to_local(now).date()
        members = self._section_members(section)
        audience = self._resolver.resolve(day)
        statuses = self._live.statuses_for(audience, [m.person_id for m in members], now=now)

        return ClassBoard(
            section=section,
            day=day,
            schedule=audience.schedule,
            members=tuple(self._member_status(m, statuses) for m in members),
        )

    def advisory_summaries(self, teacher_id: str, *, now: datetime) -> List[ClassCount]:
        try:
            sections = self._roster.list_advisories(teacher_id)
        except DataAccessError as e:
            logger.warning("advisory lookup failed for %s: %s", teacher_id, e)
            return []

        if not sections:
            return []

        audience = self._resolver.resolve(to_local(now).date())
        out = []
        for section in sections:
            ids = [m.person_id for m in self._section_members(section)]
            targeted = [pid for pid in ids if pid in audience.student_ids]
            statuses = self._live.statuses_for(audience, targeted, now=now)
            verified = sum(1 for s in statuses.values() if s in _ATTENDED)
            out.append(ClassCount(section=section, verified=verified, total=len(targeted)))
        return out

    def daily_overview(self, *, now: datetime) -> DailyOverview:
        day = to_local(now).date()
        audience = self._resolver.resolve(day)
        if not audience.is_flag_day:
            return DailyOverview(day=day, schedule=audience.schedule)

        if not audience.everyone:
            return DailyOverview(day=day, schedule=audience.schedule, verified=0, total=0)

        try:
            profiles = {m.person_id: m for m in self._roster.list_members(sorted(audience.everyone))}
        except DataAccessError as e:
            logger.warning("profile lookup failed for %s: %s", day, e)
            return DailyOverview(day=day, schedule=audience.schedule)

        # Targeted people without a profile are left out of every count.
        known = [pid for pid in sorted(audience.everyone) if pid in profiles]
        statuses = self._live.statuses_for(audience, known, now=now)

        teachers = tuple(
            self._member_status(profiles[pid], statuses)
            for pid in sorted(audience.teacher_ids, key=lambda p: self._sort_key(profiles, p))
            if pid in profiles
        )

        grouped: Dict[str, Dict[str, Dict[str, List[MemberStatus]]]] = defaultdict(lambda: defaultdict(lambda: defaultdict(list)))
        for pid in sorted(audience.student_ids, key=lambda p: self._sort_key(profiles, p)):
            member = profiles.get(pid)
            if member is None:
                continue
            grouped[member.program or "Unassigned"][member.year or "Unassigned"][member.section or "Unassigned"].append(
                self._member_status(member, statuses)
            )

        students = {
            program: {year: {sec: tuple(items) for sec, items in sorted(secs.items())} for year, secs in sorted(years.items())}
            for program, years in sorted(grouped.items())
        }

        counted = [pid for pid in known if pid in statuses]
        return DailyOverview(
            day=day,
            schedule=audience.schedule,
            verified=sum(1 for pid in counted if statuses[pid] in _ATTENDED),
            total=len(counted),
            teachers=teachers,
            students=students,
        )

    def _section_members(self, section: SectionKey) -> Sequence[RosterMember]:
        try:
            return self._roster.list_section_students(section)
        except DataAccessError as e:
            logger.warning("roster lookup failed for %s: %s", section.label(), e)
            return []

    @staticmethod
    def _member_status(member: RosterMember, statuses: Dict[str, LiveStatus]) -> MemberStatus:
        return MemberStatus(
            person_id=member.person_id,
            full_name=member.full_name,
            email=member.email,
            status=statuses.get(member.person_id),
        )

    @staticmethod
    def _sort_key(profiles: Dict[str, RosterMember], person_id: str) -> tuple:
        member = profiles.get(person_id)
        return ((member.full_name.lower() if member else ""), person_id)
