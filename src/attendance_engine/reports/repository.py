from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import CachedReport


class ReportCacheRepository(Protocol):
    def upsert(self, *, scope: str, year: int, month: int, payload: str, generated_at: datetime) -> None:
        """Create or replace the single cache row for ``(scope, year, month)``."""

        raise NotImplementedError

    def get(self, *, scope: str, year: int, month: int) -> Optional[CachedReport]:
        raise NotImplementedError
