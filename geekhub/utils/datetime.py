"""Datetime parsing helpers for provider payloads and library timestamps."""

from __future__ import annotations

from datetime import datetime, timezone


def parse_year(value: str | None) -> int | None:
    """Return the year from the first four characters of a date string."""
    if not value:
        return None
    try:
        return int(value[:4])
    except ValueError:
        return None


def utc_month_index(value: datetime) -> int:
    """Return the 0-based calendar month of a timestamp, read in UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.month - 1
