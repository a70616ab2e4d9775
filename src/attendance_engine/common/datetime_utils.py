from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Tuple


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_local(value: datetime) -> datetime:
    """Drop timezone info after converting an aware timestamp to local time."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def local_date(value: datetime) -> date:
    return to_local(value).date()


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)
