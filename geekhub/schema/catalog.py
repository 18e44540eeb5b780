"""Unified catalog schemas shared by every provider."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from geekhub.models.media import MediaType, Provider
from geekhub.schema.base import APIModel


class UnifiedCatalogItem(APIModel):
    """Provider-agnostic catalog item; ``key`` is ``{provider}-{externalId}``."""
    key: str
    type: MediaType
    provider: Provider
    external_id: str
    title: str
    year: int | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None
    genres: list[str] = Field(default_factory=list)
    summary: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class CatalogSearchResult(APIModel):
    """One page of unified search results."""
    items: list[UnifiedCatalogItem] = Field(default_factory=list)
    page: int = 1
    has_more: bool = False
