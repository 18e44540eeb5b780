from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, Request, status

from geekhub.providers.observability import ProviderMonitor
from geekhub.services.catalog_service import CatalogService
from geekhub.services.library_service import LibraryEntryReader


@dataclass(slots=True)
class RequestContext:
    """Identity forwarded by the auth proxy in front of the API."""
    user_id: str
    group_id: str | None = None


async def get_optional_request_context(
    x_user_id: str | None = Header(default=None),
    x_group_id: str | None = Header(default=None),
) -> RequestContext | None:
    user_id = (x_user_id or "").strip()
    if not user_id:
        return None
    group_id = (x_group_id or "").strip() or None
    return RequestContext(user_id=user_id, group_id=group_id)


async def get_request_context(
    context: RequestContext | None = Depends(get_optional_request_context),
) -> RequestContext:
    if context is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return context


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_provider_monitor(request: Request) -> ProviderMonitor:
    return request.app.state.provider_monitor


def get_library_reader(request: Request) -> LibraryEntryReader:
    reader = getattr(request.app.state, "library_reader", None)
    if reader is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Library store is not configured"
        )
    return reader
