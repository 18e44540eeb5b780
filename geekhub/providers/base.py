"""Base client primitives for external catalog providers."""

from __future__ import annotations

from typing import Any

from geekhub.models.media import Provider
from geekhub.providers.http import fetch_json
from geekhub.providers.observability import ProviderMonitor


class BaseProviderClient:
    """Shared request path for provider clients: every call is tracked by the monitor."""
    provider: Provider
    base_url: str

    def __init__(self, monitor: ProviderMonitor | None = None) -> None:
        self.monitor = monitor or ProviderMonitor()

    async def _get(
        self,
        operation: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        return await self.monitor.track(
            self.provider.value,
            operation,
            lambda: fetch_json(url, provider=self.provider.value, headers=headers, params=params),
            context=context,
        )
