from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_person(self, person_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records created on ``start..end`` (inclusive local dates)."""

        raise NotImplementedError

    def list_for_people(self, person_ids: Sequence[str], *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_person(self, person_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
