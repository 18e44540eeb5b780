"""Library entry schemas consumed by the stats aggregator."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from geekhub.models.media import EntryStatus, MediaType, Provider


class EntryProfile(BaseModel):
    """Owner snapshot embedded in each library entry."""
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    email: str | None = None


class LibraryEntryWithProfile(BaseModel):
    """One user's tracking state for one catalog item, with its owner profile."""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    content_id: str
    media_type: MediaType
    status: EntryStatus
    rating: int | None = Field(default=None, ge=1, le=10)
    is_favorite: bool = False
    created_at: datetime
    updated_at: datetime
    finished_at: datetime | None = None
    profiles: EntryProfile | None = None

    # Point-in-time snapshot of the catalog item taken when the entry was saved.
    group_id: str | None = None
    provider: Provider | None = None
    external_id: str | None = None
    title: str | None = None
    poster_url: str | None = None
    notes: str | None = None


class LibraryEntryQuery(BaseModel):
    """Filters handed to the library entry accessor."""
    group_id: str
    year: int
    user_id: str | None = None
    media_type: MediaType | None = None
    limit: int = 5000
