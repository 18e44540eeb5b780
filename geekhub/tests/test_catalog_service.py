from __future__ import annotations

import pytest

from geekhub.models.media import MediaType, Provider
from geekhub.services.catalog_service import InvalidProvider


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", "   "])
async def test_blank_query_returns_empty_page_without_provider_calls(catalog_service, rawg_stub, tmdb_stub, query):
    result = await catalog_service.search_unified(type=MediaType.GAME, query=query, page=3)

    assert result.items == []
    assert result.page == 3
    assert result.has_more is False
    assert rawg_stub.calls == []
    assert tmdb_stub.calls == []


@pytest.mark.asyncio
async def test_game_search_routes_to_rawg(catalog_service, rawg_stub, tmdb_stub):
    rawg_stub.search_payload = {
        "results": [{"id": 3498, "name": "Grand Theft Auto V", "released": "2013-09-17"}],
        "next": "https://api.rawg.io/api/games?page=2",
    }

    result = await catalog_service.search_unified(type=MediaType.GAME, query="gta", page=1)

    assert rawg_stub.calls == [("search", "gta", 1)]
    assert tmdb_stub.calls == []
    assert [item.key for item in result.items] == ["rawg-3498"]
    assert result.items[0].year == 2013
    assert result.has_more is True


@pytest.mark.asyncio
async def test_game_search_without_next_has_no_more(catalog_service, rawg_stub):
    rawg_stub.search_payload = {"results": [], "next": None}

    result = await catalog_service.search_unified(type=MediaType.GAME, query="nothing", page=2)

    assert result.page == 2
    assert result.has_more is False


@pytest.mark.asyncio
async def test_movie_search_routes_to_tmdb_movie(catalog_service, rawg_stub, tmdb_stub):
    tmdb_stub.search_payload = {
        "page": 2,
        "total_pages": 4,
        "results": [{"id": 603, "title": "The Matrix", "release_date": "1999-03-31"}],
    }

    result = await catalog_service.search_unified(type=MediaType.MOVIE, query="matrix", page=2)

    assert tmdb_stub.calls == [("search", "movie", "matrix", 2)]
    assert rawg_stub.calls == []
    assert result.items[0].type == MediaType.MOVIE
    assert result.items[0].title == "The Matrix"
    assert result.page == 2
    assert result.has_more is True


@pytest.mark.asyncio
async def test_tv_search_last_page_has_no_more(catalog_service, tmdb_stub):
    tmdb_stub.search_payload = {
        "page": 3,
        "total_pages": 3,
        "results": [{"id": 1399, "name": "Game of Thrones", "first_air_date": "2011-04-17"}],
    }

    result = await catalog_service.search_unified(type=MediaType.TV, query="thrones", page=3)

    assert tmdb_stub.calls == [("search", "tv", "thrones", 3)]
    assert result.items[0].type == MediaType.TV
    assert result.has_more is False


@pytest.mark.asyncio
async def test_tmdb_page_falls_back_to_requested_page(catalog_service, tmdb_stub):
    tmdb_stub.search_payload = {"results": []}

    result = await catalog_service.search_unified(type=MediaType.MOVIE, query="x", page=5)

    assert result.page == 5
    assert result.has_more is False


@pytest.mark.asyncio
async def test_anime_search_uses_tv_endpoint_and_filter(catalog_service, tmdb_stub):
    tmdb_stub.search_payload = {
        "page": 1,
        "total_pages": 1,
        "results": [
            {"id": 1, "name": "Anime", "genre_ids": [16], "original_language": "ja", "origin_country": ["JP"]},
            {"id": 2, "name": "Drama", "genre_ids": [18], "original_language": "en", "origin_country": ["US"]},
            {"id": 3, "name": "Cartoon", "genre_ids": [16], "original_language": "en", "origin_country": ["US"]},
        ],
    }

    result = await catalog_service.search_unified(type=MediaType.ANIME, query="show", page=1)

    assert tmdb_stub.calls == [("search", "tv", "show", 1)]
    assert [item.title for item in result.items] == ["Anime", "Cartoon"]
    assert all(item.type == MediaType.ANIME for item in result.items)


@pytest.mark.asyncio
async def test_detail_routes_games_to_rawg(catalog_service, rawg_stub):
    rawg_stub.detail_payload = {"id": 3498, "name": "Grand Theft Auto V", "description_raw": "Heists."}

    item = await catalog_service.get_unified_item(type=MediaType.GAME, provider=Provider.RAWG, external_id="3498")

    assert rawg_stub.calls == [("detail", "3498")]
    assert item.key == "rawg-3498"
    assert item.summary == "Heists."


@pytest.mark.asyncio
async def test_detail_routes_anime_to_tmdb_tv(catalog_service, tmdb_stub):
    tmdb_stub.detail_payload = {"id": 31911, "name": "Fullmetal Alchemist", "number_of_seasons": 1}

    item = await catalog_service.get_unified_item(type=MediaType.ANIME, provider=Provider.TMDB, external_id="31911")

    assert tmdb_stub.calls == [("detail", "tv", "31911")]
    assert item.type == MediaType.ANIME
    assert item.meta["number_of_seasons"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("media_type", "provider"),
    [
        (MediaType.GAME, Provider.TMDB),
        (MediaType.MOVIE, Provider.RAWG),
        (MediaType.ANIME, Provider.RAWG),
    ],
)
async def test_detail_rejects_mismatched_provider(catalog_service, rawg_stub, tmdb_stub, media_type, provider):
    with pytest.raises(InvalidProvider) as excinfo:
        await catalog_service.get_unified_item(type=media_type, provider=provider, external_id="1")

    assert excinfo.value.media_type == media_type
    assert rawg_stub.calls == []
    assert tmdb_stub.calls == []


@pytest.mark.asyncio
async def test_malformed_search_payload_yields_empty_page(catalog_service, tmdb_stub):
    tmdb_stub.search_payload = {"page": "first", "total_pages": "many", "results": "oops"}

    result = await catalog_service.search_unified(type=MediaType.TV, query="lost", page=2)

    assert result.items == []
    assert result.page == 2
    assert result.has_more is False
