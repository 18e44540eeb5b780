"""Raw RAWG and TMDb payload records.

Only the fields read during normalization are declared. Every other key a provider
sends is kept in ``model_extra`` and only surfaces through ``UnifiedCatalogItem.meta``.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import Field

from geekhub.schema.base import RawPayload


class RawgGenre(RawPayload):
    name: str | None = None


class RawgScreenshot(RawPayload):
    image: str | None = None


class RawgGame(RawPayload):
    """RAWG game as returned by ``/games`` and ``/games/{id}``."""
    id: int | str | None = None
    name: str | None = None
    released: str | None = None
    background_image: str | None = None
    background_image_additional: str | None = None
    short_screenshots: list[RawgScreenshot] | None = None
    genres: list[RawgGenre] | None = None
    description_raw: str | None = None


class RawgSearchResponse(RawPayload):
    results: list[RawgGame] = Field(default_factory=list)
    next: str | None = None


class TmdbGenre(RawPayload):
    id: int | None = None
    name: str | None = None


class TmdbBase(RawPayload):
    id: int | str | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    genre_ids: list[int] | None = None
    genres: list[TmdbGenre] | None = None
    original_language: str | None = None
    origin_country: list[str] | None = None


class TmdbMovie(TmdbBase):
    title: str | None = None
    release_date: str | None = None
    runtime: int | None = None


class TmdbTv(TmdbBase):
    name: str | None = None
    first_air_date: str | None = None
    number_of_seasons: int | None = None
    episode_run_time: list[int] | None = None


TmdbItemT = TypeVar("TmdbItemT", bound=TmdbBase)


class TmdbSearchResponse(RawPayload, Generic[TmdbItemT]):
    page: int | None = None
    total_pages: int | None = None
    results: list[TmdbItemT] = Field(default_factory=list)
