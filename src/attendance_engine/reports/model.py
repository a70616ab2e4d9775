from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class PersonSummary:
    """Per-student month counts; ``total_scheduled == present + late + absent``."""

    person_id: str
    full_name: str
    program: Optional[str]
    year: Optional[str]
    section: Optional[str]
    present_count: int
    late_count: int
    absent_count: int
    total_scheduled: int


@dataclass(frozen=True)
class GroupSummary:
    """Counts summed over the students of one program or one class."""

    key: str
    students: int
    present: int
    late: int
    absent: int
    scheduled: int


@dataclass(frozen=True)
class DateBreakdown:
    day: date
    on_time_end: Optional[str]
    attendance_end: Optional[str]
    total_targeted: int
    present_ids: Tuple[str, ...]
    late_ids: Tuple[str, ...]
    absent_ids: Tuple[str, ...]
    present_names: Tuple[str, ...]
    late_names: Tuple[str, ...]
    absent_names: Tuple[str, ...]

    @property
    def present(self) -> int:
        return len(self.present_ids)

    @property
    def late(self) -> int:
        return len(self.late_ids)

    @property
    def absent(self) -> int:
        return len(self.absent_ids)


@dataclass(frozen=True)
class ReportSummary:
    total_students: int
    total_present: int
    total_late: int
    total_absent: int
    total_scheduled: int
    average_attendance: float


@dataclass(frozen=True)
class MonthlyReport:
    """One month of counts.

    ``complete`` is False when a source could not be read; such a report
    carries no summary and no rows, so callers show "no data".
    """

    year: int
    month: int
    month_name: str
    college: Optional[str]
    summary: Optional[ReportSummary]
    students: Tuple[PersonSummary, ...] = ()
    programs: Tuple[GroupSummary, ...] = ()
    classes: Tuple[GroupSummary, ...] = ()
    by_date: Tuple[DateBreakdown, ...] = ()
    complete: bool = True


@dataclass(frozen=True)
class CachedReport:
    scope: str
    year: int
    month: int
    payload: str
    generated_at: datetime
