from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..attendance.model import AttendanceRecord
from ..core.enums import DayStatus


@dataclass(frozen=True)
class DayEntry:
    day: date
    status: DayStatus
    record_id: Optional[str] = None
    verified: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PersonHistory:
    """A person's ledger over ``start..end``; lists are newest first."""

    person_id: str
    start: date
    end: date
    present_days: Tuple[DayEntry, ...] = ()
    absent_days: Tuple[date, ...] = ()
    present_count: int = 0
    absent_count: int = 0
    attendance_percentage: int = 0
    waiting_today: bool = False
    recent_records: Tuple[AttendanceRecord, ...] = field(default_factory=tuple)
