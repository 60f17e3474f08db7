"""Remote metadata resolution against MusicBrainz + Cover Art Archive.

Hey future me - exact-match searches fail ALL THE TIME on consumer filenames
("Song (feat. X) [Remastered 2011] extended"). So resolve() relaxes the query
step by step:

1. title + artist (artist skipped when blank or "Unknown Artist")
2. title with (...) / [...] and "feat./ft." removed, no artist
3. the first three significant words of that cleaned title

First hit wins. We trade precision for recall here on purpose - a wrong album
is easy to fix by hand, an empty library is not. Queries already tried in this
chain are skipped so we don't burn rate-limited calls on duplicates.
"""

import logging
import re
from typing import Any

from sonora.domain.entities import UNKNOWN_ARTIST, MetadataResult
from sonora.domain.ports import IMetadataResolver
from sonora.infrastructure.integrations.coverartarchive_client import (
    CoverArtArchiveClient,
)
from sonora.infrastructure.integrations.musicbrainz_client import MusicBrainzClient

logger = logging.getLogger(__name__)

_BRACKETED = re.compile(r"\s*[\(\[][^\)\]]*[\)\]]")
_FEATURING = re.compile(r"\s+(?:feat\.?|ft\.?|featuring)\s.*$", re.IGNORECASE)

# Words of 2 chars or less ("a", "of", "DJ") don't count as significant.
_MIN_SIGNIFICANT_WORD_LENGTH = 3
_MAX_SHORT_QUERY_WORDS = 3


def clean_search_title(title: str) -> str:
    """Remove bracketed content and featuring credits from a title."""
    cleaned = _BRACKETED.sub("", title)
    cleaned = _FEATURING.sub("", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()


def significant_words(title: str) -> list[str]:
    """Words long enough to carry search meaning."""
    return [w for w in title.split() if len(w) >= _MIN_SIGNIFICANT_WORD_LENGTH]


def _usable_artist(artist: str | None) -> str | None:
    if artist is None:
        return None
    artist = artist.strip()
    if not artist or artist == UNKNOWN_ARTIST:
        return None
    return artist


def _first_dict(value: Any) -> dict[str, Any] | None:
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return None


def _credited_artist(recording: dict[str, Any]) -> str | None:
    credit = _first_dict(recording.get("artist-credit"))
    if credit is None:
        return None
    name = credit.get("name")
    if isinstance(name, str) and name:
        return name
    artist = credit.get("artist")
    if isinstance(artist, dict) and isinstance(artist.get("name"), str):
        return artist["name"] or None
    return None


def _year(date: Any) -> str | None:
    if isinstance(date, str) and len(date) >= 4 and date[:4].isdigit():
        return date[:4]
    return None


class RemoteMetadataResolver(IMetadataResolver):
    """Best-effort recording lookup producing a MetadataResult or None."""

    def __init__(
        self,
        musicbrainz: MusicBrainzClient,
        cover_art: CoverArtArchiveClient,
    ) -> None:
        self.musicbrainz = musicbrainz
        self.cover_art = cover_art

    async def resolve_by_title_artist(
        self, title: str, artist: str | None = None
    ) -> MetadataResult | None:
        """Search by title (+ artist when usable) and take the top hit.

        Args:
            title: Track title
            artist: Artist name, ignored when blank or the "Unknown Artist" sentinel

        Returns:
            MetadataResult, or None when nothing matched or the request failed
        """
        if not title or not title.strip():
            return None

        query_artist = _usable_artist(artist)
        recordings = await self.musicbrainz.search_recording(
            title.strip(), query_artist, limit=1
        )
        if not recordings:
            return None

        recording = recordings[0]
        release = _first_dict(recording.get("releases")) or {}
        release_id = release.get("id") if isinstance(release.get("id"), str) else None

        cover_art: str | None = None
        if release_id:
            cover_art = await self.cover_art.get_front_cover_url(release_id)
            if cover_art is None:
                cover_art = self.cover_art.fallback_front_url(release_id)

        recording_title = recording.get("title")
        album = release.get("title")
        mbid = recording.get("id")

        return MetadataResult(
            title=recording_title if isinstance(recording_title, str) and recording_title else title,
            artist=_credited_artist(recording) or query_artist or UNKNOWN_ARTIST,
            album=album if isinstance(album, str) and album else None,
            year=_year(release.get("date")),
            cover_art=cover_art,
            mbid=mbid if isinstance(mbid, str) else None,
            release_id=release_id,
        )

    async def resolve_by_title_only(self, title: str) -> MetadataResult | None:
        """Second-chance lookup with progressively relaxed titles.

        Args:
            title: Original (already filename-cleaned) title

        Returns:
            First successful result across the relaxation chain, or None
        """
        return await self._relaxed_lookup(title, set())

    async def _relaxed_lookup(self, title: str, tried: set[str]) -> MetadataResult | None:
        # `tried` holds lowercased queries already sent, so no candidate is searched twice.
        cleaned = clean_search_title(title)
        candidates = [cleaned]
        words = significant_words(cleaned)
        if len(words) > _MAX_SHORT_QUERY_WORDS:
            candidates.append(" ".join(words[:_MAX_SHORT_QUERY_WORDS]))

        for candidate in candidates:
            key = candidate.lower()
            if not candidate or key in tried:
                continue
            tried.add(key)
            logger.debug("Retrying metadata lookup with relaxed title %r", candidate)
            result = await self.resolve_by_title_artist(candidate)
            if result is not None:
                return result
        return None

    async def resolve(
        self, title: str, artist: str | None = None
    ) -> MetadataResult | None:
        """Title+artist lookup, falling back to the title-only chain."""
        result = await self.resolve_by_title_artist(title, artist)
        if result is not None:
            return result

        tried: set[str] = set()
        if _usable_artist(artist) is None:
            # The first query already was a title-only query for this exact title.
            tried.add(title.strip().lower())
        return await self._relaxed_lookup(title, tried)


__all__ = [
    "RemoteMetadataResolver",
    "clean_search_title",
    "significant_words",
]
