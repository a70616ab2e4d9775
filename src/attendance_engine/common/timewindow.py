"""Schedule time-of-day fields as comparable minute-of-day integers."""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Any, Optional

from ..core.constants import MINUTES_PER_DAY
from .datetime_utils import to_local


def _component(raw: str) -> int:
    raw = raw.strip()
    return int(raw) if raw.isdigit() else 0


def parse_minutes(value: Any) -> Optional[int]:
    """Convert a schedule time field into minutes after midnight.

    Accepts ``"HH:MM"`` (optionally ``":SS"``) strings as well as the TIME
    representations mysql-connector can return (``datetime.time`` or
    ``datetime.timedelta``). Missing or non-numeric components count as 0,
    so this never raises. ``None``, blank strings and values outside a single
    day yield ``None`` (no constraint).
    """

    if value is None:
        return None

    if isinstance(value, time):
        minutes = value.hour * 60 + value.minute
    elif isinstance(value, timedelta):
        minutes = int(value.total_seconds()) // 60
    elif isinstance(value, str):
        if not value.strip():
            return None
        parts = value.split(":")
        hours = _component(parts[0])
        mins = _component(parts[1]) if len(parts) > 1 else 0
        minutes = hours * 60 + mins
    else:
        return None

    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        return None
    return minutes


def minute_of_day(value: datetime) -> int:
    local = to_local(value)
    return local.hour * 60 + local.minute


def window_open(now_minute: int, attendance_end: Optional[int]) -> bool:
    """Attendance is still accepted when no cutoff is set or it has not passed."""
    return attendance_end is None or now_minute <= attendance_end


def format_minutes(minutes: Optional[int]) -> Optional[str]:
    if minutes is None:
        return None
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
