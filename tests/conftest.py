from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

import pytest

from attendance_engine.attendance.model import AttendanceRecord
from attendance_engine.captains.model import ClassCaptain
from attendance_engine.core.enums import Role
from attendance_engine.core.exceptions import DataAccessError
from attendance_engine.reports.model import CachedReport
from attendance_engine.requirements.model import RequirementSet
from attendance_engine.roster.model import RosterMember, SectionKey
from attendance_engine.schedules.model import ScheduleDay

FLAG_DAY = date(2024, 3, 4)
BSIT_1A = SectionKey("BSIT", "1", "A")
BSIT_1B = SectionKey("BSIT", "1", "B")


@dataclass
class InMemorySchedules:
    days: Dict[date, ScheduleDay] = field(default_factory=dict)
    colleges: Dict[date, str] = field(default_factory=dict)
    fail: bool = False

    def add(self, day: date, *, on_time_end: Optional[int] = None, attendance_end: Optional[int] = None, flag: bool = True):
        self.days[day] = ScheduleDay(day, flag, on_time_end, attendance_end)

    def get_for_date(self, day: date) -> Optional[ScheduleDay]:
        if self.fail:
            raise DataAccessError("schedules down")
        return self.days.get(day)

    def list_range(self, *, start: date, end: date, college: Optional[str] = None) -> List[ScheduleDay]:
        if self.fail:
            raise DataAccessError("schedules down")
        return [
            s
            for d, s in sorted(self.days.items())
            if start <= d <= end and (college is None or self.colleges.get(d, college) == college)
        ]


@dataclass
class InMemoryRequirements:
    by_day: Dict[date, RequirementSet] = field(default_factory=dict)
    fail: bool = False

    def require(self, day: date, *, students=(), teachers=(), sections=()):
        self.by_day[day] = RequirementSet(
            day=day,
            student_ids=frozenset(students),
            teacher_ids=frozenset(teachers),
            sections=frozenset(sections),
        )

    def get_for_date(self, day: date) -> Optional[RequirementSet]:
        if self.fail:
            raise DataAccessError("requirements down")
        return self.by_day.get(day)

    def list_range(self, *, start: date, end: date) -> Dict[date, RequirementSet]:
        if self.fail:
            raise DataAccessError("requirements down")
        return {d: r for d, r in self.by_day.items() if start <= d <= end}


class InMemoryRoster:
    def __init__(self):
        self.members: Dict[str, RosterMember] = {}
        self.advisories: Dict[str, List[SectionKey]] = {}
        self.failing_sections: set = set()
        self.section_calls: List[SectionKey] = []
        self.fail = False

    def add_student(self, person_id: str, name: str, section: Optional[SectionKey] = BSIT_1A) -> RosterMember:
        member = RosterMember(
            person_id=person_id,
            role=Role.STUDENT,
            full_name=name,
            email=f"{person_id}@school.test",
            program=section.program if section else None,
            year=section.year if section else None,
            section=section.section if section else None,
        )
        self.members[person_id] = member
        return member

    def add_teacher(self, person_id: str, name: str) -> RosterMember:
        member = RosterMember(person_id=person_id, role=Role.TEACHER, full_name=name)
        self.members[person_id] = member
        return member

    def get_member(self, person_id: str) -> Optional[RosterMember]:
        if self.fail:
            raise DataAccessError("roster down")
        return self.members.get(person_id)

    def list_members(self, person_ids):
        if self.fail:
            raise DataAccessError("roster down")
        return [self.members[p] for p in person_ids if p in self.members]

    def list_section_students(self, section: SectionKey):
        self.section_calls.append(section)
        if self.fail or section in self.failing_sections:
            raise DataAccessError("roster down")
        return [m for m in self.members.values() if m.role == Role.STUDENT and m.section_key == section]

    def list_students(self, *, college: Optional[str] = None):
        if self.fail:
            raise DataAccessError("roster down")
        return [m for m in self.members.values() if m.role == Role.STUDENT]

    def list_advisories(self, teacher_id: str):
        if self.fail:
            raise DataAccessError("roster down")
        return list(self.advisories.get(teacher_id, []))


class InMemoryAttendance:
    def __init__(self):
        self.records: List[AttendanceRecord] = []
        self.fail = False

    def add(self, person_id: str, created_at: datetime, *, verified: bool = True) -> AttendanceRecord:
        record = AttendanceRecord(
            record_id=f"r{len(self.records) + 1}",
            person_id=person_id,
            created_at=created_at,
            verified=verified,
        )
        self.records.append(record)
        return record

    def list_for_person(self, person_id: str, *, start: date, end: date):
        return self.list_for_people([person_id], start=start, end=end)

    def list_for_people(self, person_ids, *, start: date, end: date):
        if self.fail:
            raise DataAccessError("records down")
        wanted = set(person_ids)
        return [r for r in self.records if r.person_id in wanted and start <= r.day <= end]

    def get_recent_for_person(self, person_id: str, limit: int):
        if self.fail:
            raise DataAccessError("records down")
        items = [r for r in self.records if r.person_id == person_id]
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items[:limit]


class InMemoryCaptains:
    def __init__(self):
        self.by_section: Dict[SectionKey, ClassCaptain] = {}

    def get_for_section(self, section: SectionKey) -> Optional[ClassCaptain]:
        return self.by_section.get(section)

    def get_for_captain(self, captain_user_id: str) -> Optional[ClassCaptain]:
        for c in self.by_section.values():
            if c.captain_user_id == captain_user_id:
                return c
        return None

    def upsert(self, *, section, captain_user_id, assigned_by, assigned_at) -> None:
        self.by_section[section] = ClassCaptain(
            section=section,
            captain_user_id=captain_user_id,
            assigned_at=assigned_at,
            assigned_by=assigned_by,
        )


class InMemoryReportCache:
    def __init__(self):
        self.rows: Dict[tuple, CachedReport] = {}

    def upsert(self, *, scope: str, year: int, month: int, payload: str, generated_at: datetime) -> None:
        self.rows[(scope, year, month)] = CachedReport(scope, year, month, payload, generated_at)

    def get(self, *, scope: str, year: int, month: int) -> Optional[CachedReport]:
        return self.rows.get((scope, year, month))


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


@pytest.fixture
def schedules() -> InMemorySchedules:
    return InMemorySchedules()


@pytest.fixture
def requirements() -> InMemoryRequirements:
    return InMemoryRequirements()


@pytest.fixture
def roster() -> InMemoryRoster:
    return InMemoryRoster()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def captains() -> InMemoryCaptains:
    return InMemoryCaptains()


@pytest.fixture
def report_cache() -> InMemoryReportCache:
    return InMemoryReportCache()


@pytest.fixture
def resolver(schedules, requirements, roster):
    from attendance_engine.targeting.service import AudienceResolver

    return AudienceResolver(schedules, requirements, roster)
