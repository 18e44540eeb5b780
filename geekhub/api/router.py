"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import catalog, stats

api_router = APIRouter()
api_router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
