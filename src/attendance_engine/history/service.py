from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from ..attendance.records import earliest_by_day
from ..attendance.repository import AttendanceRepository
from ..classification.classifier import classify_day
from ..common.datetime_utils import to_local
from ..core.constants import DEFAULT_HISTORY_DAYS, DEFAULT_RECENT_LIMIT
from ..core.enums import DayStatus
from ..core.exceptions import DataAccessError, ValidationError
from ..targeting.service import AudienceResolver
from .model import DayEntry, PersonHistory

logger = logging.getLogger(__name__)


def attendance_percentage(present: int, absent: int) -> int:
    """Rounded half up; 0 when there is nothing to count."""

    denominator = present + absent
    if denominator <= 0:
        return 0
    return int(math.floor(present * 100 / denominator + 0.5))


class HistoryService:
    def __init__(
        self,
        resolver: AudienceResolver,
        attendance: AttendanceRepository,
        *,
        default_days: int = DEFAULT_HISTORY_DAYS,
    ):
        self._resolver = resolver
        self._attendance = attendance
        self._default_days = int(default_days)

    def build_history(
        self,
        person_id: str,
        *,
        now: datetime,
        days: int | None = None,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ) -> PersonHistory:
        days = self._default_days if days is None else int(days)
        if days < 0:
            raise ValidationError("History range must not be negative")

        end = to_local(now).date()
        start = end - timedelta(days=days)
        empty = PersonHistory(person_id=person_id, start=start, end=end)

        audiences = self._resolver.targeted_dates(person_id, start, end)

        try:
            records = self._attendance.list_for_person(person_id, start=start, end=end)
        except DataAccessError as e:
            logger.warning("attendance lookup failed for %s: %s", person_id, e)
            return empty

        earliest = earliest_by_day(records)
        present: list[DayEntry] = []
        absent = []
        for audience in audiences:
            record = earliest.get(audience.day)
            status = classify_day(audience.day, audience.schedule, record, now=now)
            if status is None:
                continue
            if status == DayStatus.ABSENT:
                absent.append(audience.day)
                continue
            present.append(
                DayEntry(
                    day=audience.day,
                    status=status,
                    record_id=record.record_id if record else None,
                    verified=bool(record and record.verified),
                    created_at=record.created_at if record else None,
                )
            )

        present.sort(key=lambda e: e.day, reverse=True)
        absent.sort(reverse=True)

        present_count = sum(1 for e in present if e.status == DayStatus.VERIFIED)
        waiting_today = any(e.day == end and e.record_id is None for e in present)

        return PersonHistory(
            person_id=person_id,
            start=start,
            end=end,
            present_days=tuple(present),
            absent_days=tuple(absent),
            present_count=present_count,
            absent_count=len(absent),
            attendance_percentage=attendance_percentage(present_count, len(absent)),
            waiting_today=waiting_today,
            recent_records=tuple(self._recent(person_id, recent_limit)),
        )

    def _recent(self, person_id: str, limit: int):
        if limit <= 0:
            return []
        try:
            return self._attendance.get_recent_for_person(person_id, limit)
        except DataAccessError as e:
            logger.warning("recent records lookup failed for %s: %s", person_id, e)
            return []
