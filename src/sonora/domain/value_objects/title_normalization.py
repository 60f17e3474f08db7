"""Track title cleanup for filename-derived titles.

Hey future me - files coming off phones are FILTHY. "01 - Song (Official Video)",
"y2mate.com - Song [dQw4w9WgXcQ]", "Song_Name_xR2y5uG1oPQ"... This module turns
that into something you can show AND search MusicBrainz with.

The step order matters! Track-number stripping has to run before whitespace
normalization, and the YouTube-id rule relies on the "-"/"_" separator still
being there. Each step is a plain regex substitution, so unmatched input simply
passes through - nothing here can raise.

Examples:
    >>> normalize_title("01 - Song Title (Official Video)")
    'Song Title'
    >>> normalize_title("y2mate.com - Cool Song [Official Audio]")
    'Cool Song'
    >>> normalize_title("05_Random_Song_xR2y5uG1oPQ")
    'Random Song'
"""

import re

# Step 1: quality / source annotations, both bracket styles.
_ANNOTATION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r" \(Official Video\)",
        r" \(Official Music Video\)",
        r" \(Official Audio\)",
        r" \(Audio\)",
        r" \(Lyric Video\)",
        r" \(Lyrics\)",
        r" \[Official Video\]",
        r" \[Official Music Video\]",
        r" \[Official Audio\]",
        r" \[Audio\]",
        r" \[Lyric Video\]",
        r" \[Lyrics\]",
        r" \(Music Video\)",
        r" \[Music Video\]",
        r" - HQ",
        r" \(HQ\)",
        r" - HD",
        r" \(HD\)",
        r" \(Audio Only\)",
        r" \[Audio Only\]",
    )
)

# Step 2: leading track numbers ("01 - ", "1. ", "07 ").
_TRACK_NUMBER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\d{1,2}\s*-\s*"),
    re.compile(r"^\d{1,2}\.\s*"),
    re.compile(r"^\d{1,2}\s+"),
)

# Step 3: downloader-site prefix.
_DOWNLOADER_PREFIX = re.compile(r"^y2mate\.com\s*-\s*", re.IGNORECASE)

# Step 4: trailing bracketed fragment, usually a pasted video id.
_TRAILING_BRACKET = re.compile(r" \[.*?\]$")

# Step 5: bitrate / resolution annotations.
_BITRATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\s*\(\s*\d+\s*kbp?s\s*\)", re.IGNORECASE),
    re.compile(r"\s*\[\s*\d+\s*kbp?s\s*\]", re.IGNORECASE),
    re.compile(r"\s*-\s*\d{3,4}p?", re.IGNORECASE),
    re.compile(r"\s*\(\s*\d{3,4}p?\s*\)", re.IGNORECASE),
)

# Step 6: YouTube-style 11 character id glued on with "-" or "_".
_TRAILING_VIDEO_ID = re.compile(r"\s*(?:-|_)\s*[A-Za-z0-9_-]{11}\s*$")

# Step 7: leftover floating number at the end.
_TRAILING_NUMBER = re.compile(r"\s+\d+\s*$")

_WHITESPACE = re.compile(r"\s+")


def _normalize_once(title: str) -> str:
    cleaned = title

    for pattern in _ANNOTATION_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    for pattern in _TRACK_NUMBER_PATTERNS:
        cleaned = pattern.sub("", cleaned, count=1)

    cleaned = _DOWNLOADER_PREFIX.sub("", cleaned, count=1)
    cleaned = _TRAILING_BRACKET.sub("", cleaned)

    for pattern in _BITRATE_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    cleaned = _TRAILING_VIDEO_ID.sub("", cleaned)
    cleaned = _TRAILING_NUMBER.sub("", cleaned)

    cleaned = _WHITESPACE.sub(" ", cleaned)
    cleaned = cleaned.replace("_-_", " - ")
    cleaned = cleaned.replace("_", " ")

    return cleaned.strip()


def normalize_title(raw_title: str) -> str:
    """Strip download noise from a raw, filename-derived title.

    Runs the cleanup steps until the output stops changing. A single pass is
    not idempotent on underscore-separated names ("05_Song" only becomes
    "05 Song" at the end of the pass, exposing the track number), so we
    iterate to a fixed point. Every pass either shortens the string or turns
    an underscore into a space, so this terminates quickly.

    Args:
        raw_title: Title as derived from a filename or a sloppy tag

    Returns:
        Cleaned title ("" for empty input)
    """
    if not raw_title:
        return ""

    current = raw_title
    while True:
        cleaned = _normalize_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def strip_extension(filename: str) -> str:
    """Drop the last ".ext" from a filename."""
    return re.sub(r"\.[^/.]+$", "", filename)


def title_from_filename(filename: str) -> str:
    """Provisional display title used at scan time (no heuristics beyond "_" -> " ")."""
    return strip_extension(filename).replace("_", " ")


__all__ = [
    "normalize_title",
    "strip_extension",
    "title_from_filename",
]
