"""Metadata search endpoints.

Thin HTTP face of the remote resolver: a single title(+artist) lookup and a
small batch variant. Both run through the app-wide RateLimiter, so a batch of
10 takes at least ~10 seconds - that's why the batch is capped.
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sonora.api.dependencies import get_metadata_resolver
from sonora.api.schemas.metadata import (
    MAX_BATCH_TRACKS,
    BatchMetadataRequest,
    BatchMetadataResponse,
    ErrorResponse,
    MetadataResultResponse,
)
from sonora.application.services.remote_metadata_resolver import RemoteMetadataResolver
from sonora.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/metadata", tags=["metadata"])


@router.get(
    "/search",
    response_model=MetadataResultResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def search_metadata(
    title: str | None = Query(None, description="Track title"),
    artist: str | None = Query(None, description="Artist name"),
    resolver: RemoteMetadataResolver = Depends(get_metadata_resolver),
) -> MetadataResultResponse | JSONResponse:
    """Look up one recording by title (and artist when given)."""
    if not title or not title.strip():
        raise ValidationException("title query parameter is required")

    result = await resolver.resolve_by_title_artist(title, artist or "")
    if result is None:
        return JSONResponse(status_code=404, content={"error": "No metadata found"})
    return MetadataResultResponse.from_result(result)


@router.post("/batch", response_model=BatchMetadataResponse)
async def batch_metadata(
    request: BatchMetadataRequest,
    resolver: RemoteMetadataResolver = Depends(get_metadata_resolver),
) -> BatchMetadataResponse:
    """Look up up to 10 tracks in order. Entries past the cap are ignored."""
    results: dict[str, MetadataResultResponse] = {}
    for track in request.tracks[:MAX_BATCH_TRACKS]:
        if not track.title.strip():
            continue
        result = await resolver.resolve_by_title_artist(track.title, track.artist)
        if result is not None:
            results[track.id] = MetadataResultResponse.from_result(result)

    if len(request.tracks) > MAX_BATCH_TRACKS:
        logger.info(
            "Batch metadata request truncated: %d of %d tracks processed",
            MAX_BATCH_TRACKS,
            len(request.tracks),
        )
    return BatchMetadataResponse(results=results)
