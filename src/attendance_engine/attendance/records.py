"""First scan wins: the earliest record per person per day is authoritative."""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Tuple

from .model import AttendanceRecord


def earliest_by_person_day(records: Iterable[AttendanceRecord]) -> Dict[Tuple[str, date], AttendanceRecord]:
    out: Dict[Tuple[str, date], AttendanceRecord] = {}
    for r in records:
        key = (r.person_id, r.day)
        current = out.get(key)
        if current is None or r.created_at < current.created_at:
            out[key] = r
    return out


def earliest_by_day(records: Iterable[AttendanceRecord]) -> Dict[date, AttendanceRecord]:
    """Same rule for a single person's records."""

    return {d: r for (_, d), r in earliest_by_person_day(records).items()}
