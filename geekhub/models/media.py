"""Catalog and library enumerations shared by schemas, services, and routes."""

from __future__ import annotations

import enum


class MediaType(str, enum.Enum):
    """Supported media categories for catalog items and library entries."""
    MOVIE = "movie"
    TV = "tv"
    ANIME = "anime"
    GAME = "game"


class EntryStatus(str, enum.Enum):
    """Tracking statuses for a user's progress on a catalog item."""
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DROPPED = "dropped"


class Provider(str, enum.Enum):
    """External catalog sources."""
    RAWG = "rawg"
    TMDB = "tmdb"


class StatsScope(str, enum.Enum):
    """Whether stats cover one user's entries or the whole group."""
    MINE = "mine"
    GROUP = "group"


class StatsType(str, enum.Enum):
    """Media type filter for stats, with ``all`` meaning no filter."""
    ALL = "all"
    MOVIE = "movie"
    TV = "tv"
    ANIME = "anime"
    GAME = "game"


def provider_for_type(media_type: MediaType) -> Provider:
    """Return the only provider allowed to serve a media type."""
    if media_type == MediaType.GAME:
        return Provider.RAWG
    return Provider.TMDB
