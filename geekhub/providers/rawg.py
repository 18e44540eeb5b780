"""RAWG client for game search and detail lookups."""

from __future__ import annotations

from urllib.parse import quote

from geekhub.core.config import settings
from geekhub.models.media import Provider
from geekhub.providers.base import BaseProviderClient
from geekhub.providers.http import ProviderCredentialsMissing
from geekhub.providers.observability import ProviderMonitor
from geekhub.schema.providers import RawgGame, RawgSearchResponse


class RawgClient(BaseProviderClient):
    provider = Provider.RAWG
    base_url = "https://api.rawg.io/api"

    def __init__(self, api_key: str | None = None, monitor: ProviderMonitor | None = None) -> None:
        super().__init__(monitor)
        self.api_key = api_key or settings.rawg_api_key

    def _auth(self) -> dict[str, str]:
        if not self.api_key:
            raise ProviderCredentialsMissing("RAWG credentials missing; set RAWG_API_KEY")
        return {"key": self.api_key}

    async def search_games(self, query: str, page: int = 1) -> RawgSearchResponse:
        params = {**self._auth(), "search": query, "page": page}
        payload = await self._get("search", "/games", params=params, context={"query": query, "page": page})
        return RawgSearchResponse.model_validate(payload)

    async def get_game(self, external_id: str) -> RawgGame:
        payload = await self._get(
            "detail",
            f"/games/{quote(external_id, safe='')}",
            params=self._auth(),
            context={"external_id": external_id},
        )
        return RawgGame.model_validate(payload)
