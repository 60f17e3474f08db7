"""External service integrations (MusicBrainz, Cover Art Archive)."""

from sonora.infrastructure.integrations.coverartarchive_client import (
    CoverArtArchiveClient,
)
from sonora.infrastructure.integrations.http_fetcher import RateLimitedFetcher
from sonora.infrastructure.integrations.musicbrainz_client import MusicBrainzClient

__all__ = ["CoverArtArchiveClient", "MusicBrainzClient", "RateLimitedFetcher"]
