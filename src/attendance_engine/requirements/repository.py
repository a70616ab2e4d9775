from __future__ import annotations

from datetime import date
from typing import Mapping, Protocol

from .model import RequirementSet


class RequirementRepository(Protocol):
    def get_for_date(self, day: date) -> RequirementSet:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date) -> Mapping[date, RequirementSet]:
        """Requirement sets keyed by date; dates without any row are omitted."""

        raise NotImplementedError
