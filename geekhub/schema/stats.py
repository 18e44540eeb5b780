"""Stats summary schemas returned by the stats aggregator."""

from __future__ import annotations

from pydantic import Field

from geekhub.models.media import MediaType, StatsScope, StatsType
from geekhub.schema.base import APIModel


class StatsTotals(APIModel):
    """Counters over a whole entry collection."""
    total: int = 0
    planned: int = 0
    in_progress: int = 0
    completed: int = 0
    dropped: int = 0
    favorites: int = 0
    rated: int = 0
    avg_rating: float | None = None
    by_type: dict[str, int] = Field(default_factory=dict)


class MonthBucket(APIModel):
    """Completed and rated counts for one calendar month."""
    month: int
    label: str
    completed: int = 0
    rated: int = 0


class TopRatedEntry(APIModel):
    id: str
    content_id: str
    user_id: str
    title: str | None = None
    type: MediaType
    rating: int
    poster_url: str | None = None


class MemberStats(APIModel):
    """Leaderboard row for one group member."""
    user_id: str
    display_name: str | None = None
    avatar_url: str | None = None
    entries_count: int = 0
    completed_count: int = 0
    rated_count: int = 0
    avg_rating: float | None = None


class StatsSummary(APIModel):
    scope: StatsScope
    year: int
    type: StatsType
    totals: StatsTotals
    monthly: list[MonthBucket]
    top_rated: list[TopRatedEntry]
    members: list[MemberStats]
