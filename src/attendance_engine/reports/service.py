from __future__ import annotations

import calendar
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..attendance.records import earliest_by_person_day
from ..attendance.repository import AttendanceRepository
from ..classification.classifier import classify_arrival
from ..common.datetime_utils import month_bounds
from ..common.serialization import dumps
from ..common.timewindow import format_minutes, minute_of_day
from ..common.validators import require_month
from ..core.enums import LiveStatus
from ..core.exceptions import DataAccessError
from ..roster.model import RosterMember
from ..roster.repository import RosterRepository
from ..targeting.service import AudienceResolver
from .model import CachedReport, DateBreakdown, GroupSummary, MonthlyReport, PersonSummary, ReportSummary
from .repository import ReportCacheRepository

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    present: int = 0
    late: int = 0
    scheduled: int = 0


def reconcile_absent(person_id: str, total_scheduled: int, present: int, late: int) -> int:
    """Absences are whatever scheduled days were not attended, never below zero.

    A negative value means more attended days than required ones, which points
    at bad data upstream, so it is logged. :meth:`ReportService.build_monthly_report`
    tallies at most one record per targeted day and cannot go negative; the
    clamp matters for counts taken from raw record totals.
    """

    absent = total_scheduled - present - late
    if absent < 0:
        logger.warning(
            "attendance exceeds schedule for %s (scheduled=%s present=%s late=%s)",
            person_id,
            total_scheduled,
            present,
            late,
        )
        return 0
    return absent


def _group(
    summaries: Iterable[PersonSummary],
    key_of: Callable[[PersonSummary], str],
) -> tuple[GroupSummary, ...]:
    groups: Dict[str, List[PersonSummary]] = defaultdict(list)
    for s in summaries:
        groups[key_of(s)].append(s)

    return tuple(
        GroupSummary(
            key=key,
            students=len(members),
            present=sum(m.present_count for m in members),
            late=sum(m.late_count for m in members),
            absent=sum(m.absent_count for m in members),
            scheduled=sum(m.total_scheduled for m in members),
        )
        for key, members in sorted(groups.items())
    )


def _program_key(s: PersonSummary) -> str:
    return s.program or "Unknown"


def _class_key(s: PersonSummary) -> str:
    if not (s.program and s.year and s.section):
        return "Unassigned"
    return f"{s.program} {s.year}-{s.section}"


def _sort_name(m: RosterMember) -> tuple:
    return (m.full_name.split(" ")[-1].lower() if m.full_name else "", m.full_name.lower(), m.person_id)


class ReportService:
    """Monthly aggregates, always recomputed from raw rows."""

    def __init__(
        self,
        resolver: AudienceResolver,
        attendance: AttendanceRepository,
        roster: RosterRepository,
        cache: Optional[ReportCacheRepository] = None,
    ):
        self._resolver = resolver
        self._attendance = attendance
        self._roster = roster
        self._cache = cache

    def build_monthly_report(
        self,
        year: int,
        month: int,
        *,
        college: Optional[str] = None,
        program: Optional[str] = None,
        year_level: Optional[str] = None,
        section: Optional[str] = None,
        as_of: Optional[date] = None,
    ) -> MonthlyReport:
        """Per-student, per-program, per-class and per-date counts for one month.

        Only verified records count; each student's earliest record of a day is
        the one classified. ``as_of`` drops flag days after that date. If the
        roster, schedules, requirements or records cannot be read the report
        comes back with ``complete=False`` and no counts.
        """

        year, month = require_month(year, month)
        start, end = month_bounds(year, month)
        if as_of is not None and as_of < end:
            end = as_of

        try:
            students = self._students(college, program=program, year_level=year_level, section=section)
            by_id = {s.person_id: s for s in students}
            audiences = self._resolver.resolve_range(start, end, college=college, strict=True) if end >= start else {}
            records = self._records(list(by_id), start, end)
        except DataAccessError as e:
            logger.warning("report %04d-%02d unavailable: %s", year, month, e)
            return MonthlyReport(
                year=year,
                month=month,
                month_name=calendar.month_name[month],
                college=college,
                summary=None,
                complete=False,
            )

        earliest = earliest_by_person_day(records)

        tallies: Dict[str, _Tally] = {pid: _Tally() for pid in by_id}
        by_date: List[DateBreakdown] = []

        for day in sorted(audiences):
            audience = audiences[day]
            schedule = audience.schedule
            on_time_end = schedule.on_time_end_minute if schedule else None

            targeted = sorted(pid for pid in audience.student_ids if pid in by_id)
            present_ids: List[str] = []
            late_ids: List[str] = []
            absent_ids: List[str] = []

            for pid in targeted:
                tally = tallies[pid]
                tally.scheduled += 1
                record = earliest.get((pid, day))
                if record is None or not record.verified:
                    absent_ids.append(pid)
                    continue
                if classify_arrival(minute_of_day(record.created_at), on_time_end) == LiveStatus.LATE:
                    tally.late += 1
                    late_ids.append(pid)
                else:
                    tally.present += 1
                    present_ids.append(pid)

            by_date.append(
                DateBreakdown(
                    day=day,
                    on_time_end=format_minutes(on_time_end),
                    attendance_end=format_minutes(schedule.attendance_end_minute if schedule else None),
                    total_targeted=len(targeted),
                    present_ids=tuple(present_ids),
                    late_ids=tuple(late_ids),
                    absent_ids=tuple(absent_ids),
                    present_names=tuple(self._name(by_id, pid) for pid in present_ids),
                    late_names=tuple(self._name(by_id, pid) for pid in late_ids),
                    absent_names=tuple(self._name(by_id, pid) for pid in absent_ids),
                )
            )

        summaries = tuple(
            PersonSummary(
                person_id=m.person_id,
                full_name=m.full_name,
                program=m.program,
                year=m.year,
                section=m.section,
                present_count=tallies[m.person_id].present,
                late_count=tallies[m.person_id].late,
                absent_count=reconcile_absent(
                    m.person_id,
                    tallies[m.person_id].scheduled,
                    tallies[m.person_id].present,
                    tallies[m.person_id].late,
                ),
                total_scheduled=tallies[m.person_id].scheduled,
            )
            for m in sorted(students, key=_sort_name)
        )

        return MonthlyReport(
            year=year,
            month=month,
            month_name=calendar.month_name[month],
            college=college,
            summary=self._summary(summaries),
            students=summaries,
            programs=_group(summaries, _program_key),
            classes=_group(summaries, _class_key),
            by_date=tuple(by_date),
        )

    def generate_and_cache(
        self,
        year: int,
        month: int,
        *,
        generated_at: datetime,
        college: Optional[str] = None,
    ) -> MonthlyReport:
        """Build the whole-scope report and store it as the month's cache row."""

        report = self.build_monthly_report(year, month, college=college)
        if self._cache is None:
            return report
        if not report.complete:
            logger.warning("not caching incomplete report %s %04d-%02d", college or "all", report.year, report.month)
            return report

        self._cache.upsert(
            scope=college or "all",
            year=report.year,
            month=report.month,
            payload=dumps(report),
            generated_at=generated_at,
        )
        logger.info("cached report %s %04d-%02d", college or "all", report.year, report.month)
        return report

    def cached_report(self, year: int, month: int, *, college: Optional[str] = None) -> Optional[CachedReport]:
        year, month = require_month(year, month)
        if self._cache is None:
            return None
        return self._cache.get(scope=college or "all", year=year, month=month)

    def _students(
        self,
        college: Optional[str],
        *,
        program: Optional[str],
        year_level: Optional[str],
        section: Optional[str],
    ) -> List[RosterMember]:
        out = []
        for s in self._roster.list_students(college=college):
            if program and s.program != program:
                continue
            if year_level and str(s.year) != str(year_level):
                continue
            if section and s.section != section:
                continue
            out.append(s)
        return out

    def _records(self, person_ids: Sequence[str], start: date, end: date):
        if not person_ids or end < start:
            return []
        return self._attendance.list_for_people(person_ids, start=start, end=end)

    @staticmethod
    def _name(by_id: Dict[str, RosterMember], person_id: str) -> str:
        member = by_id.get(person_id)
        return member.full_name if member and member.full_name else person_id

    @staticmethod
    def _summary(summaries: Sequence[PersonSummary]) -> ReportSummary:
        present = sum(s.present_count for s in summaries)
        late = sum(s.late_count for s in summaries)
        absent = sum(s.absent_count for s in summaries)
        scheduled = sum(s.total_scheduled for s in summaries)
        average = round((present + late) / scheduled * 100, 2) if scheduled > 0 else 0.0
        return ReportSummary(
            total_students=len(summaries),
            total_present=present,
            total_late=late,
            total_absent=absent,
            total_scheduled=scheduled,
            average_attendance=average,
        )
