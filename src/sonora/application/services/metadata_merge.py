"""Pure merge of learned metadata into a Track.

Precedence per field:

| field                  | 1st               | 2nd                 | 3rd                         |
|------------------------|-------------------|---------------------|-----------------------------|
| title                  | learned non-blank | existing (unless it | normalized filename         |
|                        |                   | is still the raw    |                             |
|                        |                   | scan-time title)    |                             |
| artist / album         | learned non-blank | existing            | -                           |
| artwork / year         | learned           | existing            | None                        |
| quality quadruple      | learned (complete)| existing (complete) | estimate_quality(...)       |

Never downgrades a field to None. Immutable fields (id, uri, duration,
filename, format, file_size) and metadata_fetched are left untouched.
"""

from dataclasses import replace

from sonora.domain.entities import CacheEntry, Track
from sonora.domain.value_objects.quality import estimate_quality
from sonora.domain.value_objects.title_normalization import (
    normalize_title,
    strip_extension,
    title_from_filename,
)


def _pick(learned: str | None, existing: str | None) -> str | None:
    if learned is not None and learned.strip():
        return learned
    return existing


def filename_title(track: Track) -> str:
    """Normalized title derived from the file name (falls back to the current title)."""
    return normalize_title(strip_extension(track.filename)) or track.title


def with_heuristic_defaults(track: Track) -> Track:
    """Fill heuristic values: estimated quality and, for raw scan titles, a cleaned title."""
    if not track.title or track.title == title_from_filename(track.filename):
        track = replace(track, title=filename_title(track))
    if track.has_quality:
        return track
    return track.with_quality(
        estimate_quality(track.format, track.duration, track.file_size)
    )


def merge_metadata(existing: Track, learned: CacheEntry | None) -> Track:
    """Return a new Track combining existing values with learned ones.

    Args:
        existing: Current track value
        learned: Fragment learned from cache/tags/remote (None or a negative
            entry contributes nothing)

    Returns:
        New Track value; quality is always complete afterwards
    """
    if learned is None or learned.not_found:
        return with_heuristic_defaults(existing)

    merged = replace(
        existing,
        artist=_pick(learned.artist, existing.artist) or existing.artist,
        album=_pick(learned.album, existing.album) or existing.album,
        artwork=_pick(learned.cover_art, existing.artwork),
        year=_pick(learned.year, existing.year),
    )
    if learned.title and learned.title.strip():
        merged = replace(merged, title=learned.title)

    quality = learned.quality
    if quality is not None:
        merged = merged.with_quality(quality)
    return with_heuristic_defaults(merged)


__all__ = ["filename_title", "merge_metadata", "with_heuristic_defaults"]
