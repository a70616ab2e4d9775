from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ScheduleDay


class ScheduleRepository(Protocol):
    def get_for_date(self, day: date) -> Optional[ScheduleDay]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, college: Optional[str] = None) -> Sequence[ScheduleDay]:
        """Schedule rows with ``start <= day <= end``, ordered by day."""

        raise NotImplementedError
