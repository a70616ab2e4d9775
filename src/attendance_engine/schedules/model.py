from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class ScheduleDay:
    """One attendance schedule row; cutoffs are minutes after midnight."""

    day: date
    is_flag_day: bool
    on_time_end_minute: Optional[int] = None
    attendance_end_minute: Optional[int] = None
