"""API router initialization."""

# Hey future me, this aggregates the sub-routers. main.py mounts api_router under /api,
# so endpoints end up as /api/health, /api/metadata/search, /api/library/tracks, ...

from fastapi import APIRouter

from sonora.api.routers import health, library, metadata

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(metadata.router)
api_router.include_router(library.router)

__all__ = ["api_router"]
