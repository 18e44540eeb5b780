from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from geekhub.api.deps import get_catalog_service
from geekhub.models.media import MediaType, Provider
from geekhub.providers.http import ExternalAPIError, ProviderCredentialsMissing, UpstreamRequestFailed
from geekhub.providers.observability import CircuitOpenError
from geekhub.schema.catalog import CatalogSearchResult, UnifiedCatalogItem
from geekhub.services.catalog_service import CatalogService, InvalidProvider

logger = logging.getLogger("geekhub.api.catalog")

MAX_QUERY_LENGTH = 200
MAX_PAGE = 500
EXTERNAL_ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_-]*$"

router = APIRouter()


def _provider_error(exc: Exception) -> HTTPException:
    """Translate provider failures into API errors."""
    if isinstance(exc, UpstreamRequestFailed):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": str(exc), "provider": exc.provider, "upstream_status": exc.status_code},
        )
    if isinstance(exc, (ProviderCredentialsMissing, CircuitOpenError)):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.get("/search", response_model=CatalogSearchResult)
async def search_catalog(
    type: MediaType = Query(...),
    q: str = Query(default="", max_length=MAX_QUERY_LENGTH),
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    catalog: CatalogService = Depends(get_catalog_service),
) -> CatalogSearchResult:
    try:
        return await catalog.search_unified(type=type, query=q, page=page)
    except (ExternalAPIError, CircuitOpenError) as exc:
        logger.warning("Catalog search failed (type=%s page=%s): %s", type.value, page, exc)
        raise _provider_error(exc) from exc


@router.get("/item", response_model=UnifiedCatalogItem)
async def get_catalog_item(
    type: MediaType = Query(...),
    provider: Provider = Query(...),
    external_id: str = Query(
        ..., alias="externalId", min_length=1, max_length=64, pattern=EXTERNAL_ID_PATTERN
    ),
    catalog: CatalogService = Depends(get_catalog_service),
) -> UnifiedCatalogItem:
    try:
        return await catalog.get_unified_item(type=type, provider=provider, external_id=external_id)
    except InvalidProvider as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (ExternalAPIError, CircuitOpenError) as exc:
        logger.warning("Catalog lookup failed for %s-%s: %s", provider.value, external_id, exc)
        raise _provider_error(exc) from exc
