"""CoverArtArchive HTTP client implementation.

Hey future me - CoverArtArchive (CAA) is the official artwork store for
MusicBrainz releases. GET /release/{mbid} returns JSON with an "images" array;
each image has "front"/"back" flags, a "thumbnails" dict (250/500/1200 plus the
legacy "small"/"large" keys) and the original "image" URL.

CAA traffic shares the MusicBrainz limiter (same fetcher), because the
external rate limit covers both services together.

GOTCHA: Lots of releases have no artwork at all. 404 is normal, not an error.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sonora.config.settings import MusicBrainzSettings
from sonora.infrastructure.integrations.http_fetcher import RateLimitedFetcher

logger = logging.getLogger(__name__)


@dataclass
class CoverArt:
    """One image of a release."""

    image_id: str
    original_url: str
    thumbnail_250: str | None = None
    thumbnail_500: str | None = None
    thumbnail_large: str | None = None
    is_front: bool = False

    @property
    def best_url(self) -> str | None:
        """Preferred display URL: 500px, then large, then 250px, then original."""
        return (
            self.thumbnail_500
            or self.thumbnail_large
            or self.thumbnail_250
            or self.original_url
            or None
        )


def parse_images(data: Any) -> list[CoverArt]:
    """Parse the CAA release payload, skipping malformed image entries."""
    if not isinstance(data, dict):
        return []

    images: list[CoverArt] = []
    for img_data in data.get("images") or []:
        if not isinstance(img_data, dict):
            continue
        thumbnails = img_data.get("thumbnails")
        if not isinstance(thumbnails, dict):
            thumbnails = {}
        images.append(
            CoverArt(
                image_id=str(img_data.get("id", "")),
                original_url=img_data.get("image") or "",
                thumbnail_250=thumbnails.get("250") or thumbnails.get("small"),
                thumbnail_500=thumbnails.get("500"),
                thumbnail_large=thumbnails.get("large"),
                is_front=bool(img_data.get("front", False)),
            )
        )
    return images


class CoverArtArchiveClient:
    """HTTP client for CoverArtArchive release artwork."""

    def __init__(self, settings: MusicBrainzSettings, fetcher: RateLimitedFetcher) -> None:
        self.settings = settings
        self.fetcher = fetcher

    def fallback_front_url(self, release_id: str) -> str:
        """Constructed 250px front cover URL, used when the lookup fails."""
        return f"{self.settings.cover_art_base_url}/release/{release_id}/front-250"

    async def get_front_cover_url(self, release_id: str) -> str | None:
        """Get the URL of the first image flagged as front cover.

        Args:
            release_id: MusicBrainz Release ID

        Returns:
            Image URL, or None if the release has no usable front image or the
            request failed
        """
        response = await self.fetcher.fetch(
            f"{self.settings.cover_art_base_url}/release/{release_id}"
        )
        if response is None:
            return None

        try:
            data = response.json()
        except ValueError:
            logger.debug("CAA returned non-JSON body for release %s", release_id)
            return None

        for image in parse_images(data):
            if image.is_front:
                return image.best_url
        return None


__all__ = ["CoverArt", "CoverArtArchiveClient", "parse_images"]
