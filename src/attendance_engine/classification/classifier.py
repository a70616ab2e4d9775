"""Status classification shared by every view.

Both vocabularies use the same primitives: the on-time cutoff decides
Present vs Late, and :func:`window_is_open` decides whether a missing or
unverified check-in is still "in progress" or already final. ``now`` is
always passed in.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import to_local
from ..common.timewindow import minute_of_day, window_open
from ..core.constants import REMARK_LATE, REMARK_ON_TIME
from ..core.enums import DayStatus, LiveStatus
from ..schedules.model import ScheduleDay
from ..targeting.model import TargetedAudience


def classify_arrival(record_minute: int, on_time_end: Optional[int]) -> LiveStatus:
    if on_time_end is not None and record_minute > on_time_end:
        return LiveStatus.LATE
    return LiveStatus.PRESENT


def window_is_open(day: date, schedule: Optional[ScheduleDay], now: datetime) -> bool:
    """Whether check-ins for ``day`` can still arrive at instant ``now``."""

    today = to_local(now).date()
    if day > today:
        return True
    if day < today:
        return False
    end = schedule.attendance_end_minute if schedule else None
    return window_open(minute_of_day(now), end)


def classify_live(
    audience: TargetedAudience,
    person_id: str,
    record: Optional[AttendanceRecord],
    *,
    now: datetime,
) -> Optional[LiveStatus]:
    """Live status, or ``None`` when the person is not required that day.

    ``record`` must be the person's earliest record on ``audience.day``.
    """

    if not audience.includes(person_id):
        return None

    schedule = audience.schedule
    if record is not None and record.verified:
        on_time_end = schedule.on_time_end_minute if schedule else None
        return classify_arrival(minute_of_day(record.created_at), on_time_end)

    if window_is_open(audience.day, schedule, now):
        return LiveStatus.WAITING
    return LiveStatus.ABSENT


def classify_day(
    day: date,
    schedule: Optional[ScheduleDay],
    record: Optional[AttendanceRecord],
    *,
    now: datetime,
) -> Optional[DayStatus]:
    """Ledger status of one required day; ``None`` for days not yet reached."""

    if record is not None:
        if record.verified:
            return DayStatus.VERIFIED
        if day == to_local(now).date() and window_is_open(day, schedule, now):
            return DayStatus.PENDING
        return DayStatus.UNVERIFIED

    if day > to_local(now).date():
        return None
    if window_is_open(day, schedule, now):
        return DayStatus.PENDING
    return DayStatus.ABSENT


def remark_for(record: AttendanceRecord, schedule: Optional[ScheduleDay]) -> str:
    """Remark ("On Time" or "Late") shown when a record is reviewed."""

    if schedule is None or not schedule.is_flag_day:
        return REMARK_ON_TIME
    status = classify_arrival(minute_of_day(record.created_at), schedule.on_time_end_minute)
    return REMARK_LATE if status == LiveStatus.LATE else REMARK_ON_TIME
