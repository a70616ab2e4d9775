from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import local_date


@dataclass(frozen=True)
class AttendanceRecord:
    """One check-in written by the scanner; only ``verified`` changes later."""

    record_id: str
    person_id: str
    created_at: datetime
    verified: bool
    method: Optional[str] = None

    @property
    def day(self) -> date:
        return local_date(self.created_at)
