"""FastAPI application entrypoint and health reporting.

Invariants:
- Provider clients, the catalog service, and the provider monitor are built once
  with the app and live on ``app.state``; routes reach them through dependencies.
- Library entries live in an external persistence service. The deployment must hand
  its accessor to ``attach_library_reader`` before serving traffic; until then
  ``/api/stats/summary`` answers 503 and a warning is logged at startup.
- Health detail is only exposed to requests with a user context or allowlisted hosts.
"""

import ipaddress
import logging
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from geekhub.api.deps import RequestContext, get_optional_request_context
from geekhub.api.router import api_router
from geekhub.core.config import settings
from geekhub.core.logging import configure_logging
from geekhub.providers.observability import ProviderMonitor, summarize_providers
from geekhub.services.catalog_service import build_catalog_service
from geekhub.services.library_service import LibraryEntryReader

logger = logging.getLogger("geekhub.main")

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix=settings.api_prefix)

app.state.provider_monitor = ProviderMonitor(circuit_threshold=settings.provider_circuit_threshold)
app.state.catalog_service = build_catalog_service(app.state.provider_monitor)
app.state.library_reader = None


def attach_library_reader(reader: LibraryEntryReader | None) -> None:
    """Install the accessor the stats routes read library entries through."""
    app.state.library_reader = reader
    logger.info("Library reader %s", type(reader).__name__ if reader is not None else "detached")


@app.on_event("startup")
async def _configure_logging() -> None:
    """Apply the configured log level once the server starts."""
    configure_logging()
    if app.state.library_reader is None:
        logger.warning("No library reader attached; stats endpoints will answer 503")
    logger.info("%s started (environment=%s)", settings.app_name, settings.environment)


def _entry_matches(entry: str, candidate: str) -> bool:
    """Return True if an allowlist entry matches a candidate host/IP."""
    try:
        network = ipaddress.ip_network(entry, strict=False)
        return ipaddress.ip_address(candidate) in network
    except ValueError:
        return entry.casefold() == candidate.casefold()


def _ip_or_host_allowlisted(request: Request) -> bool:
    """Check request client/host headers against the health allowlist."""
    if not settings.health_allowlist:
        return False
    candidates: list[str] = []
    if request.client and request.client.host:
        candidates.append(request.client.host)
    host_header = request.headers.get("host")
    if host_header:
        candidates.append(host_header.split(":")[0])
    return any(
        _entry_matches(entry, candidate)
        for candidate in candidates
        for entry in settings.health_allowlist
        if entry
    )


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health(
    request: Request, context: RequestContext | None = Depends(get_optional_request_context)
) -> dict[str, Any]:
    """Return health status and optionally include provider telemetry."""
    if context is None and not _ip_or_host_allowlisted(request):
        return {"status": "ok"}

    snapshot = await request.app.state.provider_monitor.snapshot()
    telemetry = summarize_providers(snapshot)
    status = "ok" if not telemetry["issues"] else "degraded"
    return {"status": status, "providers": telemetry}
