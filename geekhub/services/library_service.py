"""Library entry accessors consumed by the stats service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Protocol

from geekhub.schema.library import LibraryEntryQuery, LibraryEntryWithProfile


class LibraryEntryReader(Protocol):
    """Read interface over the persistence service's library entries."""

    async def list_entries(self, query: LibraryEntryQuery) -> list[LibraryEntryWithProfile]:
        ...


class InMemoryLibraryReader:
    """Library accessor backed by a list, for tests and local runs."""

    def __init__(self, entries: Iterable[LibraryEntryWithProfile] = ()) -> None:
        self._entries: list[LibraryEntryWithProfile] = list(entries)

    def add(self, entry: LibraryEntryWithProfile) -> None:
        self._entries.append(entry)

    async def list_entries(self, query: LibraryEntryQuery) -> list[LibraryEntryWithProfile]:
        """Return entries of the group created during ``query.year``, in insertion order."""
        start, end = _year_bounds(query.year)
        matches: list[LibraryEntryWithProfile] = []
        for entry in self._entries:
            if entry.group_id != query.group_id:
                continue
            if query.user_id is not None and entry.user_id != query.user_id:
                continue
            if query.media_type is not None and entry.media_type != query.media_type:
                continue
            if not start <= _as_utc(entry.created_at) < end:
                continue
            matches.append(entry)
            if len(matches) >= query.limit:
                break
        return matches


def _year_bounds(year: int) -> tuple[datetime, datetime]:
    """Return the half-open UTC range covering a calendar year."""
    return (
        datetime(year, 1, 1, tzinfo=timezone.utc),
        datetime(year + 1, 1, 1, tzinfo=timezone.utc),
    )


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC for safe comparisons."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
