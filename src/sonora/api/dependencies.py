"""Dependency injection for API endpoints."""

from typing import cast

from fastapi import HTTPException, Request

from sonora.application.services.library_service import LibraryService
from sonora.application.services.remote_metadata_resolver import RemoteMetadataResolver


# Hey future me, everything below comes from app.state, wired up ONCE in the lifespan
# (see sonora/infrastructure/lifecycle.py). Routes never build clients themselves - that
# would create a second RateLimiter and break the "one limiter per process" rule that
# keeps us inside MusicBrainz's 1 req/sec. Tests override these with app.dependency_overrides.
def get_metadata_resolver(request: Request) -> RemoteMetadataResolver:
    """Get the shared metadata resolver from app state.

    Raises:
        HTTPException: 503 if the resolver is not initialized
    """
    if not hasattr(request.app.state, "resolver"):
        raise HTTPException(status_code=503, detail="Metadata resolver not initialized")
    return cast(RemoteMetadataResolver, request.app.state.resolver)


def get_library_service(request: Request) -> LibraryService:
    """Get the library service from app state.

    Raises:
        HTTPException: 503 if the library is not initialized
    """
    if not hasattr(request.app.state, "library"):
        raise HTTPException(status_code=503, detail="Library not initialized")
    return cast(LibraryService, request.app.state.library)
