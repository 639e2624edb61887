from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def calendar_date(value: Any) -> date:
    """Normalize a stored/received date into a plain ``date``.

    ``date`` is the one representation used for grouping and comparisons.
    Datetimes drop their time-of-day, ISO strings keep only the date part.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_iso_date(value.strip()[:10])
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}")
    raise ValidationError(f"Unsupported date value: {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_clock_time(value: Any) -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS`` into a ``time``."""
    if isinstance(value, time):
        return value
    text = str(value).strip() if value is not None else ""
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time: {value!r}")
