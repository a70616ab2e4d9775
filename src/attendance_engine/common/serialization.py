from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from enum import Enum
from typing import Any


def to_primitive(value: Any) -> Any:
    """Turn result dataclasses into JSON-ready dicts/lists/strings."""

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_primitive(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, dict):
        return {str(to_primitive(k)): to_primitive(v) for k, v in value.items()}
    if isinstance(value, (frozenset, set)):
        return sorted(to_primitive(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [to_primitive(v) for v in value]
    return value


def dumps(value: Any) -> str:
    return json.dumps(to_primitive(value), sort_keys=True, ensure_ascii=False)
