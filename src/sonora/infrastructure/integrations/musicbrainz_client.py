"""MusicBrainz recording search client."""

import logging
from typing import Any

from sonora.config.settings import MusicBrainzSettings
from sonora.infrastructure.integrations.http_fetcher import RateLimitedFetcher

logger = logging.getLogger(__name__)


def _escape_lucene_phrase(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_recording_query(title: str, artist: str | None = None) -> str:
    """Build the Lucene query for a recording search.

    The quotes around title and artist are IMPORTANT - without them "The Beatles"
    becomes "the OR beatles" and the ranking turns to garbage.
    """
    query = f'recording:"{_escape_lucene_phrase(title)}"'
    if artist:
        query += f' AND artist:"{_escape_lucene_phrase(artist)}"'
    return query


class MusicBrainzClient:
    """Thin client over the MusicBrainz /recording search endpoint.

    All traffic goes through the shared RateLimitedFetcher, so there is no
    rate limiting logic in here.
    """

    def __init__(self, settings: MusicBrainzSettings, fetcher: RateLimitedFetcher) -> None:
        """
        Initialize MusicBrainz client.

        Args:
            settings: MusicBrainz configuration settings
            fetcher: Shared rate-limited fetcher
        """
        self.settings = settings
        self.fetcher = fetcher

    # Hey future me, results come back sorted by MB's relevance score. We only ever take
    # the first one (limit=1) - no secondary sort, no fuzzy re-ranking. Messy filenames
    # are handled by relaxing the QUERY in the resolver, not by being clever here.
    async def search_recording(
        self, title: str, artist: str | None = None, limit: int = 1
    ) -> list[dict[str, Any]] | None:
        """
        Search recordings by title (and artist if given).

        Args:
            title: Track title
            artist: Artist name, omitted from the query when None/blank
            limit: Maximum number of results

        Returns:
            List of recording dicts (possibly empty), or None if the request failed
        """
        query = build_recording_query(title, artist.strip() if artist else None)

        response = await self.fetcher.fetch(
            f"{self.settings.api_base_url}/recording",
            params={"query": query, "limit": limit, "fmt": "json"},
        )
        if response is None:
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning("MusicBrainz returned non-JSON body for query %s", query)
            return None

        recordings = data.get("recordings") if isinstance(data, dict) else None
        if not isinstance(recordings, list):
            return []
        return [r for r in recordings if isinstance(r, dict)]


__all__ = ["MusicBrainzClient", "build_recording_query"]
