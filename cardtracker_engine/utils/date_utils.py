"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timezone
from typing import Any, Optional


def to_instant(value: Any) -> Optional[datetime]:
    """
    Normalize a date-like value to a naive UTC datetime.

    Accepts datetimes (aware ones are converted to UTC), dates (midnight) and
    ISO 8601 strings. Anything else, or an unparsable string, yields None.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return to_instant(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def to_date(value: Any) -> Optional[date]:
    """Calendar date of a date-like value, or None if it has none"""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    instant = to_instant(value)
    return instant.date() if instant is not None else None


def resolve_due_day(due_day: Any, reference: date) -> Optional[date]:
    """
    Next occurrence of a day-of-month on or after the reference date.

    Days past the end of a short month clamp to its last day, so a due day
    of 31 resolves to Feb 28/29 in February.
    """
    if isinstance(due_day, bool) or not isinstance(due_day, int):
        return None
    if not 1 <= due_day <= 31:
        return None

    year, month = reference.year, reference.month
    candidate = _clamped(year, month, due_day)
    if candidate < reference:
        month += 1
        if month > 12:
            year, month = year + 1, 1
        candidate = _clamped(year, month, due_day)
    return candidate


def _clamped(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))
