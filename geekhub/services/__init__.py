"""Service-layer helpers for API operations."""

from . import (
    anime_filter,
    catalog_normalize,
    catalog_service,
    library_service,
    stats_service,
)

__all__ = [
    "anime_filter",
    "catalog_normalize",
    "catalog_service",
    "library_service",
    "stats_service",
]
