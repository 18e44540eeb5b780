"""Shared pytest fixtures for aggregation, catalog, and API tests."""

from __future__ import annotations

import itertools
from typing import Any, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from geekhub.api.deps import get_catalog_service, get_library_reader
from geekhub.main import app
from geekhub.schema.library import LibraryEntryWithProfile
from geekhub.schema.providers import RawgGame, RawgSearchResponse, TmdbMovie, TmdbSearchResponse, TmdbTv
from geekhub.services.catalog_service import CatalogService
from geekhub.services.library_service import InMemoryLibraryReader

_entry_ids = itertools.count(1)


@pytest.fixture()
def make_entry() -> Callable[..., LibraryEntryWithProfile]:
    """Build library entries with sensible defaults; keyword overrides win."""

    def _make(**overrides: Any) -> LibraryEntryWithProfile:
        number = next(_entry_ids)
        data: dict[str, Any] = {
            "id": f"entry-{number}",
            "user_id": "user-1",
            "group_id": "group-1",
            "content_id": f"tmdb-{number}",
            "media_type": "movie",
            "provider": "tmdb",
            "external_id": str(number),
            "title": "Test Movie",
            "poster_url": None,
            "status": "completed",
            "rating": None,
            "is_favorite": False,
            "created_at": "2024-01-15T10:00:00Z",
            "updated_at": "2024-01-15T10:00:00Z",
            "finished_at": None,
            "profiles": {"id": "user-1", "display_name": "Usuario 1", "avatar_url": None},
        }
        data.update(overrides)
        return LibraryEntryWithProfile.model_validate(data)

    return _make


class StubRawgClient:
    """RAWG client double returning canned payloads and recording calls."""

    def __init__(self, search: dict[str, Any] | None = None, detail: dict[str, Any] | None = None) -> None:
        self.search_payload = search or {"results": [], "next": None}
        self.detail_payload = detail or {}
        self.calls: list[tuple[Any, ...]] = []

    async def search_games(self, query: str, page: int = 1) -> RawgSearchResponse:
        self.calls.append(("search", query, page))
        return RawgSearchResponse.model_validate(self.search_payload)

    async def get_game(self, external_id: str) -> RawgGame:
        self.calls.append(("detail", external_id))
        return RawgGame.model_validate(self.detail_payload)


class StubTmdbClient:
    """TMDb client double returning canned payloads and recording calls."""

    def __init__(self, search: dict[str, Any] | None = None, detail: dict[str, Any] | None = None) -> None:
        self.search_payload = search or {"page": 1, "total_pages": 1, "results": []}
        self.detail_payload = detail or {}
        self.calls: list[tuple[Any, ...]] = []

    async def search(self, kind: str, query: str, page: int = 1) -> TmdbSearchResponse:
        self.calls.append(("search", kind, query, page))
        model = TmdbMovie if kind == "movie" else TmdbTv
        return TmdbSearchResponse[model].model_validate(self.search_payload)

    async def get_detail(self, kind: str, external_id: str) -> TmdbMovie | TmdbTv:
        self.calls.append(("detail", kind, external_id))
        model = TmdbMovie if kind == "movie" else TmdbTv
        return model.model_validate(self.detail_payload)


@pytest.fixture()
def rawg_stub() -> StubRawgClient:
    return StubRawgClient()


@pytest.fixture()
def tmdb_stub() -> StubTmdbClient:
    return StubTmdbClient()


@pytest.fixture()
def catalog_service(rawg_stub: StubRawgClient, tmdb_stub: StubTmdbClient) -> CatalogService:
    return CatalogService(rawg_stub, tmdb_stub)  # type: ignore[arg-type]


@pytest.fixture()
def library_reader() -> InMemoryLibraryReader:
    reader = InMemoryLibraryReader()
    app.dependency_overrides[get_library_reader] = lambda: reader
    yield reader
    app.dependency_overrides.pop(get_library_reader, None)


@pytest.fixture()
def catalog_override(catalog_service: CatalogService) -> CatalogService:
    app.dependency_overrides[get_catalog_service] = lambda: catalog_service
    yield catalog_service
    app.dependency_overrides.pop(get_catalog_service, None)


@pytest_asyncio.fixture()
async def client() -> AsyncClient:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as async_client:
        yield async_client
