"""API schemas for metadata search."""

from pydantic import BaseModel, ConfigDict, Field

from sonora.domain.entities import MetadataResult

# Only this many entries of a batch request are looked up - each lookup costs
# at least one rate-limited MusicBrainz request.
MAX_BATCH_TRACKS = 10


class MetadataResultResponse(BaseModel):
    """Single metadata lookup result (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    artist: str
    album: str | None = None
    year: str | None = None
    cover_art: str | None = Field(default=None, alias="coverArt")
    mbid: str | None = None
    release_id: str | None = Field(default=None, alias="releaseId")

    @classmethod
    def from_result(cls, result: MetadataResult) -> "MetadataResultResponse":
        return cls(
            title=result.title,
            artist=result.artist,
            album=result.album,
            year=result.year,
            cover_art=result.cover_art,
            mbid=result.mbid,
            release_id=result.release_id,
        )


class BatchTrackRequest(BaseModel):
    """One track to look up in a batch request."""

    id: str = Field(..., description="Caller's track id, echoed as the results key")
    title: str = Field(default="", description="Track title")
    artist: str | None = Field(default=None, description="Artist name (optional)")


class BatchMetadataRequest(BaseModel):
    """Request schema for batch metadata lookup."""

    tracks: list[BatchTrackRequest] = Field(default_factory=list)


class BatchMetadataResponse(BaseModel):
    """Results keyed by track id. Misses are simply absent."""

    results: dict[str, MetadataResultResponse] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error body used by the metadata endpoints."""

    error: str
