from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Iterable, Optional

from ..attendance.records import earliest_by_person_day
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import to_local
from ..core.enums import LiveStatus
from ..core.exceptions import DataAccessError
from ..targeting.model import TargetedAudience
from ..targeting.service import AudienceResolver
from .classifier import classify_live

logger = logging.getLogger(__name__)


class LiveStatusService:
    """Right-now statuses for people on a date (today unless told otherwise)."""

    def __init__(self, resolver: AudienceResolver, attendance: AttendanceRepository):
        self._resolver = resolver
        self._attendance = attendance

    def status_for(self, person_id: str, *, now: datetime, day: Optional[date] = None) -> Optional[LiveStatus]:
        day = day or to_local(now).date()
        audience = self._resolver.resolve(day)
        return self.statuses_for(audience, [person_id], now=now).get(person_id)

    def statuses_for(
        self,
        audience: TargetedAudience,
        person_ids: Iterable[str],
        *,
        now: datetime,
    ) -> Dict[str, LiveStatus]:
        """Statuses for the targeted subset of ``person_ids``.

        Untargeted people are left out. If records cannot be read, nobody is
        classified.
        """

        targeted = sorted({p for p in person_ids if audience.includes(p)})
        if not targeted:
            return {}

        try:
            records = self._attendance.list_for_people(targeted, start=audience.day, end=audience.day)
        except DataAccessError as e:
            logger.warning("attendance lookup failed for %s: %s", audience.day, e)
            return {}

        earliest = earliest_by_person_day(records)
        out: Dict[str, LiveStatus] = {}
        for person_id in targeted:
            status = classify_live(audience, person_id, earliest.get((person_id, audience.day)), now=now)
            if status is not None:
                out[person_id] = status
        return out
