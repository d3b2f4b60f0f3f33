"""Date helpers shared by sorting code and templates."""

from datetime import datetime, timezone
from typing import Any


def as_utc(value: Any) -> datetime:
    """Coerce a stored timestamp to an aware UTC datetime.
    
    SQLite hands back naive datetimes while PostgreSQL returns aware ones;
    naive values are taken to be UTC. Strings are parsed as ISO 8601 and
    missing values become "now".
    """
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if not isinstance(value, datetime):
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_date(value: Any, fmt: str = "long") -> str:
    """Human readable date: 'Mar 5, 2025' (short) or 'March 5, 2025 at 02:30 PM' (long)."""
    dt = as_utc(value)
    if fmt == "short":
        return f"{dt.strftime('%b')} {dt.day}, {dt.year}"
    return f"{dt.strftime('%B')} {dt.day}, {dt.year} at {dt.strftime('%I:%M %p')}"
