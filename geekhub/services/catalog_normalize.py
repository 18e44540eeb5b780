"""Normalize RAWG and TMDb payloads into ``UnifiedCatalogItem``.

Invariants:
- ``key`` is always ``{provider}-{externalId}``.
- Missing or malformed provider fields become None or empty lists; payload content never
  raises. Only a media type the provider cannot serve does.
- ``upgrade_rawg_image`` is idempotent.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from geekhub.models.media import MediaType, Provider, provider_for_type
from geekhub.schema.catalog import UnifiedCatalogItem
from geekhub.schema.providers import RawgGame, TmdbMovie, TmdbTv
from geekhub.utils.datetime import parse_year

RAWG_MEDIA_SEGMENT = "media.rawg.io/media/"
RAWG_RESIZE_WIDTH = 1280
_RAWG_RESIZED_RE = re.compile(r"/resize/\d+/-/")

TMDB_POSTER_BASE = "https://image.tmdb.org/t/p/w500"
TMDB_BACKDROP_BASE = "https://image.tmdb.org/t/p/w1280"

RAWG_META_FIELDS = ("platforms", "stores", "metacritic", "ratings_count", "slug", "rating")
TMDB_META_FIELDS = ("popularity", "vote_average", "vote_count")


class InvalidProvider(ValueError):
    """Raised when a media type is paired with a provider that cannot serve it."""

    def __init__(self, media_type: MediaType, provider: Provider) -> None:
        expected = provider_for_type(media_type)
        super().__init__(
            f"Invalid provider {provider.value} for {media_type.value}; expected {expected.value}"
        )
        self.media_type = media_type
        self.provider = provider


def upgrade_rawg_image(url: str) -> str:
    """Request the 1280px resize variant of a RAWG media URL.

    URLs that already carry a ``resize/<width>/-`` segment, or that are not served
    from RAWG's media host, come back unchanged.
    """
    if _RAWG_RESIZED_RE.search(url) or RAWG_MEDIA_SEGMENT not in url:
        return url
    return url.replace(RAWG_MEDIA_SEGMENT, f"{RAWG_MEDIA_SEGMENT}resize/{RAWG_RESIZE_WIDTH}/-/", 1)


def _external_id(value: Any) -> str:
    return "" if value is None else str(value)


def _extras(raw: Any, fields: tuple[str, ...]) -> dict[str, Any]:
    extra = raw.model_extra or {}
    return {name: extra.get(name) for name in fields}


def _rawg_poster(raw: RawgGame) -> str | None:
    if raw.background_image:
        return raw.background_image
    if raw.background_image_additional:
        return raw.background_image_additional
    screenshots = raw.short_screenshots or []
    if screenshots and screenshots[0].image:
        return screenshots[0].image
    return None


def normalize_rawg_item(raw: RawgGame | Mapping[str, Any]) -> UnifiedCatalogItem:
    """Build a unified game item from a RAWG search result or detail payload."""
    if not isinstance(raw, RawgGame):
        raw = RawgGame.model_validate(raw)
    external_id = _external_id(raw.id)
    poster = _rawg_poster(raw)
    return UnifiedCatalogItem(
        key=f"{Provider.RAWG.value}-{external_id}",
        type=MediaType.GAME,
        provider=Provider.RAWG,
        external_id=external_id,
        title=raw.name or "",
        year=parse_year(raw.released),
        poster_url=upgrade_rawg_image(poster) if poster else None,
        backdrop_url=raw.background_image_additional or raw.background_image or None,
        genres=[genre.name for genre in raw.genres or [] if genre.name],
        summary=raw.description_raw,
        meta=_extras(raw, RAWG_META_FIELDS),
    )


def normalize_tmdb(
    type: MediaType | str, raw: TmdbMovie | TmdbTv | Mapping[str, Any]
) -> UnifiedCatalogItem:
    """Build a unified movie, tv, or anime item from a TMDb payload.

    Movies read ``title``/``release_date``/``runtime``; tv and anime read
    ``name``/``first_air_date``/``number_of_seasons``/``episode_run_time``.
    Games are not served by TMDb and raise ``InvalidProvider``.
    """
    media_type = MediaType(type)
    if provider_for_type(media_type) != Provider.TMDB:
        raise InvalidProvider(media_type, Provider.TMDB)
    is_movie = media_type == MediaType.MOVIE
    model = TmdbMovie if is_movie else TmdbTv
    if not isinstance(raw, model):
        source = raw.model_dump() if isinstance(raw, (TmdbMovie, TmdbTv)) else raw
        raw = model.model_validate(source)

    meta = _extras(raw, TMDB_META_FIELDS)
    if is_movie:
        title = raw.title
        year = parse_year(raw.release_date)
        meta["runtime"] = raw.runtime
    else:
        title = raw.name
        year = parse_year(raw.first_air_date)
        meta["number_of_seasons"] = raw.number_of_seasons
        meta["episode_run_time"] = raw.episode_run_time
        meta["original_language"] = raw.original_language
        meta["origin_country"] = raw.origin_country

    external_id = _external_id(raw.id)
    return UnifiedCatalogItem(
        key=f"{Provider.TMDB.value}-{external_id}",
        type=media_type,
        provider=Provider.TMDB,
        external_id=external_id,
        title=title or "",
        year=year,
        poster_url=f"{TMDB_POSTER_BASE}{raw.poster_path}" if raw.poster_path else None,
        backdrop_url=f"{TMDB_BACKDROP_BASE}{raw.backdrop_path}" if raw.backdrop_path else None,
        genres=[genre.name for genre in raw.genres or [] if genre.name],
        summary=raw.overview,
        meta=meta,
    )
