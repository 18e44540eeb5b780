"""Catalog provider clients."""

from __future__ import annotations

from geekhub.providers.observability import ProviderMonitor
from geekhub.providers.rawg import RawgClient
from geekhub.providers.tmdb import TmdbClient

__all__ = ["ProviderMonitor", "RawgClient", "TmdbClient"]
