"""Calendar-day helpers shared by the rules and the aggregator."""

from __future__ import annotations

from datetime import date, datetime


def as_calendar_date(value: date | datetime | str | None) -> date | None:
    """Truncate a date, datetime or ISO-8601 string to its calendar day."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()
