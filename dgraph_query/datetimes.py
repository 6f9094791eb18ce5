"""Small date/time contract used by ``dateTime`` query arguments."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any


def is_recognized_datetime(value: Any) -> bool:
    """A normalized date/time is a timezone-aware ``datetime``."""
    return (
        isinstance(value, datetime)
        and value.tzinfo is not None
        and value.tzinfo.utcoffset(value) is not None
    )


def is_native_date(value: Any) -> bool:
    return isinstance(value, date)


def from_native_date(value: date) -> datetime:
    """Normalize a ``date`` or naive ``datetime``; naive values are read as UTC."""
    if is_recognized_datetime(value):
        return value  # type: ignore[return-value]
    if isinstance(value, datetime):
        return value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    raise TypeError(f"expected a date or datetime, got {type(value)!r}")


def to_iso_string(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds")
