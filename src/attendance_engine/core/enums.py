from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles stored on user profiles."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @property
    def is_admin(self) -> bool:
        return self in (Role.ADMIN, Role.SUPERADMIN)


class LiveStatus(str, Enum):
    """Right-now status of a targeted person for today."""

    WAITING = "Waiting"
    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"


class DayStatus(str, Enum):
    """Outcome of one required day in a person's own ledger."""

    VERIFIED = "Verified"
    PENDING = "Pending"
    UNVERIFIED = "Unverified"
    ABSENT = "Absent"

    def to_live(self) -> LiveStatus:
        return {
            DayStatus.VERIFIED: LiveStatus.PRESENT,
            DayStatus.PENDING: LiveStatus.WAITING,
            DayStatus.UNVERIFIED: LiveStatus.ABSENT,
            DayStatus.ABSENT: LiveStatus.ABSENT,
        }[self]
