"""Stats aggregation over library entries.

Invariants:
- Aggregators are pure: they never mutate entries and never perform I/O.
- Empty input is valid and yields zeroed counters with ``avg_rating`` set to None.
- Sorting is stable, so ties keep the order entries arrived in.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from geekhub.core.config import settings
from geekhub.models.media import EntryStatus, MediaType, StatsScope, StatsType
from geekhub.schema.library import LibraryEntryQuery, LibraryEntryWithProfile
from geekhub.schema.stats import MemberStats, MonthBucket, StatsSummary, StatsTotals, TopRatedEntry
from geekhub.services.library_service import LibraryEntryReader
from geekhub.utils.datetime import utc_month_index

logger = logging.getLogger("geekhub.services.stats")

DEFAULT_TOP_RATED_LIMIT = 5
DEFAULT_LOCALE = "es"

MONTH_LABELS: dict[str, tuple[str, ...]] = {
    "es": ("Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic"),
    "en": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
}


class TooManyEntries(Exception):
    """Raised when a stats query matches more rows than the configured cap."""

    def __init__(self, max_rows: int) -> None:
        super().__init__(f"Too many entries (>{max_rows}). Please narrow your filters.")
        self.max_rows = max_rows


def _average(total: int, count: int) -> float | None:
    """Mean rounded half-up to one decimal, or None without samples."""
    if count == 0:
        return None
    return math.floor(total * 10 / count + 0.5) / 10


def aggregate_totals(entries: Iterable[LibraryEntryWithProfile]) -> StatsTotals:
    """Count entries by status and media type, plus favorites and ratings."""
    by_status = {status: 0 for status in EntryStatus}
    by_type = {media_type.value: 0 for media_type in MediaType}
    total = favorites = rated = rating_sum = 0

    for entry in entries:
        total += 1
        by_status[entry.status] += 1
        by_type[entry.media_type.value] += 1
        if entry.is_favorite:
            favorites += 1
        if entry.rating is not None:
            rated += 1
            rating_sum += entry.rating

    return StatsTotals(
        total=total,
        planned=by_status[EntryStatus.PLANNED],
        in_progress=by_status[EntryStatus.IN_PROGRESS],
        completed=by_status[EntryStatus.COMPLETED],
        dropped=by_status[EntryStatus.DROPPED],
        favorites=favorites,
        rated=rated,
        avg_rating=_average(rating_sum, rated),
        by_type=by_type,
    )


def aggregate_monthly(
    entries: Iterable[LibraryEntryWithProfile], locale: str = DEFAULT_LOCALE
) -> list[MonthBucket]:
    """Bucket completions and ratings into the twelve calendar months.

    Completions are dated by ``finished_at`` (falling back to ``updated_at``) and ratings
    by ``updated_at``. Entries are not filtered by year here; callers pass entries
    already scoped to the year they ask about.
    """
    labels = MONTH_LABELS.get(locale, MONTH_LABELS[DEFAULT_LOCALE])
    monthly = [MonthBucket(month=index + 1, label=label) for index, label in enumerate(labels)]

    for entry in entries:
        if entry.status == EntryStatus.COMPLETED:
            finished = entry.finished_at or entry.updated_at
            monthly[utc_month_index(finished)].completed += 1
        if entry.rating is not None:
            monthly[utc_month_index(entry.updated_at)].rated += 1

    return monthly


def get_top_rated(
    entries: Iterable[LibraryEntryWithProfile], limit: int = DEFAULT_TOP_RATED_LIMIT
) -> list[TopRatedEntry]:
    """Return the highest-rated entries, best first."""
    rated = [entry for entry in entries if entry.rating is not None]
    rated.sort(key=lambda entry: entry.rating, reverse=True)
    return [
        TopRatedEntry(
            id=entry.id,
            content_id=entry.content_id,
            user_id=entry.user_id,
            title=entry.title,
            type=entry.media_type,
            rating=entry.rating,
            poster_url=entry.poster_url,
        )
        for entry in rated[:limit]
    ]


@dataclass(slots=True)
class _MemberAccumulator:
    user_id: str
    display_name: str | None
    avatar_url: str | None
    entries_count: int = 0
    completed_count: int = 0
    rated_count: int = 0
    rating_sum: int = 0


def aggregate_member_stats(entries: Iterable[LibraryEntryWithProfile]) -> list[MemberStats]:
    """Build the group leaderboard.

    Members are ordered by completed count, then by average rating; members
    without ratings come after rated members with the same completed count.
    """
    members: dict[str, _MemberAccumulator] = {}
    for entry in entries:
        member = members.get(entry.user_id)
        if member is None:
            profile = entry.profiles
            member = _MemberAccumulator(
                user_id=entry.user_id,
                display_name=profile.display_name if profile else None,
                avatar_url=profile.avatar_url if profile else None,
            )
            members[entry.user_id] = member
        member.entries_count += 1
        if entry.status == EntryStatus.COMPLETED:
            member.completed_count += 1
        if entry.rating is not None:
            member.rated_count += 1
            member.rating_sum += entry.rating

    rows = [
        MemberStats(
            user_id=member.user_id,
            display_name=member.display_name,
            avatar_url=member.avatar_url,
            entries_count=member.entries_count,
            completed_count=member.completed_count,
            rated_count=member.rated_count,
            avg_rating=_average(member.rating_sum, member.rated_count),
        )
        for member in members.values()
    ]

    def sort_key(row: MemberStats) -> tuple[int, float]:
        avg = row.avg_rating if row.avg_rating is not None else -1.0
        return (-row.completed_count, -avg)

    return sorted(rows, key=sort_key)


def aggregate_stats_summary(
    entries: Sequence[LibraryEntryWithProfile],
    scope: StatsScope,
    year: int,
    type: StatsType,
    *,
    top_rated_limit: int = DEFAULT_TOP_RATED_LIMIT,
    locale: str = DEFAULT_LOCALE,
) -> StatsSummary:
    """Combine totals, monthly series, top rated, and the member leaderboard."""
    return StatsSummary(
        scope=scope,
        year=year,
        type=type,
        totals=aggregate_totals(entries),
        monthly=aggregate_monthly(entries, locale=locale),
        top_rated=get_top_rated(entries, top_rated_limit),
        members=aggregate_member_stats(entries) if scope == StatsScope.GROUP else [],
    )


async def summarize_library(
    reader: LibraryEntryReader,
    *,
    user_id: str,
    group_id: str,
    scope: StatsScope,
    year: int,
    type: StatsType,
) -> StatsSummary:
    """Load the entries a stats request covers and aggregate them.

    Raises ``TooManyEntries`` when the accessor returns more than ``stats_max_rows``.
    """
    max_rows = settings.stats_max_rows
    query = LibraryEntryQuery(
        group_id=group_id,
        year=year,
        user_id=user_id if scope == StatsScope.MINE else None,
        media_type=None if type == StatsType.ALL else MediaType(type.value),
        limit=max_rows + 1,
    )
    entries = await reader.list_entries(query)
    if len(entries) > max_rows:
        logger.warning(
            "Stats query for group %s (scope=%s year=%s type=%s) exceeded %d rows",
            group_id,
            scope.value,
            year,
            type.value,
            max_rows,
        )
        raise TooManyEntries(max_rows)
    return aggregate_stats_summary(
        entries,
        scope,
        year,
        type,
        top_rated_limit=settings.stats_top_rated_limit,
        locale=settings.display_locale,
    )
