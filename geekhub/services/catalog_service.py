"""Unified catalog search and lookup across RAWG and TMDb."""

from __future__ import annotations

import logging

from geekhub.models.media import MediaType, Provider, provider_for_type
from geekhub.providers.observability import ProviderMonitor
from geekhub.providers.rawg import RawgClient
from geekhub.providers.tmdb import TmdbClient, TmdbKind
from geekhub.schema.catalog import CatalogSearchResult, UnifiedCatalogItem
from geekhub.schema.providers import TmdbSearchResponse
from geekhub.services.anime_filter import filter_anime_candidates
from geekhub.services.catalog_normalize import InvalidProvider, normalize_rawg_item, normalize_tmdb

logger = logging.getLogger("geekhub.services.catalog")

__all__ = ["CatalogService", "InvalidProvider", "build_catalog_service"]


def _tmdb_kind(media_type: MediaType) -> TmdbKind:
    return "movie" if media_type == MediaType.MOVIE else "tv"


def _tmdb_has_more(data: TmdbSearchResponse, page: int) -> bool:
    if data.total_pages is None:
        return False
    return page < data.total_pages


class CatalogService:
    """Route catalog requests to the provider that owns each media type."""

    def __init__(self, rawg: RawgClient, tmdb: TmdbClient) -> None:
        self.rawg = rawg
        self.tmdb = tmdb

    async def search_unified(self, *, type: MediaType, query: str, page: int = 1) -> CatalogSearchResult:
        """Search one page of the provider for ``type``.

        Blank queries return an empty page without calling any provider.
        """
        media_type = MediaType(type)
        if not query or not query.strip():
            return CatalogSearchResult(items=[], page=page, has_more=False)

        if media_type == MediaType.GAME:
            data = await self.rawg.search_games(query, page)
            items = [normalize_rawg_item(raw) for raw in data.results]
            return CatalogSearchResult(items=items, page=page, has_more=bool(data.next))

        tmdb_data = await self.tmdb.search(_tmdb_kind(media_type), query, page)
        results = tmdb_data.results
        if media_type == MediaType.ANIME:
            results = filter_anime_candidates(results)
            logger.debug(
                "Anime filter kept %d of %d TV results for %r", len(results), len(tmdb_data.results), query
            )
        items = [normalize_tmdb(media_type, raw) for raw in results]
        return CatalogSearchResult(
            items=items,
            page=tmdb_data.page or page,
            has_more=_tmdb_has_more(tmdb_data, page),
        )

    async def get_unified_item(
        self, *, type: MediaType, provider: Provider, external_id: str
    ) -> UnifiedCatalogItem:
        """Fetch one item's detail; raises ``InvalidProvider`` on an illegal pairing."""
        media_type = MediaType(type)
        provider = Provider(provider)
        if provider != provider_for_type(media_type):
            raise InvalidProvider(media_type, provider)

        if media_type == MediaType.GAME:
            return normalize_rawg_item(await self.rawg.get_game(external_id))
        raw = await self.tmdb.get_detail(_tmdb_kind(media_type), external_id)
        return normalize_tmdb(media_type, raw)


def build_catalog_service(monitor: ProviderMonitor) -> CatalogService:
    """Construct the service and its provider clients around a shared monitor."""
    return CatalogService(RawgClient(monitor=monitor), TmdbClient(monitor=monitor))
