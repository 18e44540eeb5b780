"""TMDb client for movie and TV search and detail lookups."""

from __future__ import annotations

from urllib.parse import quote

from typing import Literal

from geekhub.core.config import settings
from geekhub.models.media import Provider
from geekhub.providers.base import BaseProviderClient
from geekhub.providers.http import ProviderCredentialsMissing
from geekhub.providers.observability import ProviderMonitor
from geekhub.schema.providers import TmdbMovie, TmdbSearchResponse, TmdbTv

TmdbKind = Literal["movie", "tv"]


class TmdbClient(BaseProviderClient):
    provider = Provider.TMDB
    base_url = "https://api.themoviedb.org/3"

    def __init__(
        self,
        api_key: str | None = None,
        auth_token: str | None = None,
        monitor: ProviderMonitor | None = None,
    ) -> None:
        super().__init__(monitor)
        self.api_key = api_key or settings.tmdb_api_key
        self.auth_token = auth_token or settings.tmdb_api_auth_header

    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        headers: dict[str, str] = {"accept": "application/json"}
        params: dict[str, str] = {}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        elif self.api_key:
            params["api_key"] = self.api_key
        else:
            raise ProviderCredentialsMissing(
                "TMDB credentials missing; set TMDB_API_AUTH_HEADER or TMDB_API_KEY"
            )
        return headers, params

    async def search(self, kind: TmdbKind, query: str, page: int = 1) -> TmdbSearchResponse:
        headers, params = self._auth()
        payload = await self._get(
            "search",
            f"/search/{kind}",
            headers=headers,
            params={**params, "query": query, "page": page},
            context={"kind": kind, "query": query, "page": page},
        )
        if kind == "movie":
            return TmdbSearchResponse[TmdbMovie].model_validate(payload)
        return TmdbSearchResponse[TmdbTv].model_validate(payload)

    async def get_detail(self, kind: TmdbKind, external_id: str) -> TmdbMovie | TmdbTv:
        headers, params = self._auth()
        payload = await self._get(
            "detail",
            f"/{kind}/{quote(external_id, safe='')}",
            headers=headers,
            params=params,
            context={"kind": kind, "external_id": external_id},
        )
        if kind == "movie":
            return TmdbMovie.model_validate(payload)
        return TmdbTv.model_validate(payload)
