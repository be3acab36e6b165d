"""Datetime helpers shared by scheduling, invoicing and reporting."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

_datetime_adapter = TypeAdapter(datetime)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Return a naive UTC datetime for *value*, or ``None`` when unparseable."""
    if value is None or value == "":
        return None
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError:
        return None
    return naive_utc(parsed)


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise an aware datetime to naive UTC (scheduling columns are naive)."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def as_utc(value: datetime) -> datetime:
    """Treat naive values read back from the database as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def whole_hours(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Full hours between *start* and *end*, truncated toward zero."""
    if start is None or end is None:
        return 0
    return int((naive_utc(end) - naive_utc(start)).total_seconds() / 3600)
