"""Embedded tag extraction with mutagen.

Hey future me - mutagen gives us two views of a file: the "easy" interface
(title/artist/album as plain lists, same keys for MP3/FLAC/MP4/OGG) and the raw
one (APIC frames, FLAC pictures, MP4 covr atoms, stream info). We use both.
Reading is blocking disk I/O, so extract() pushes it to a worker thread.

ANY failure - unreadable file, unsupported container, content:// uri we can't
open, broken frames - ends in None. Tag reading is best effort and must never
take down an enrichment batch.
"""

import asyncio
import base64
import logging
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import mutagen
from mutagen.flac import FLAC, Picture

from sonora.domain.entities import LocalTags
from sonora.domain.ports import ITagReader

logger = logging.getLogger(__name__)

# ID3/FLAC picture type 3 = "Cover (front)"
_FRONT_COVER_TYPE = 3


def uri_to_path(file_uri: str) -> Path | None:
    """Turn a file:// uri or plain path into a local Path. Other schemes -> None."""
    if not file_uri:
        return None
    parsed = urlparse(file_uri)
    if parsed.scheme == "file":
        return Path(url2pathname(unquote(parsed.path)))
    if parsed.scheme == "" or len(parsed.scheme) == 1:  # plain path or "C:\..."
        return Path(file_uri)
    return None


def _first_text(easy: Any, key: str) -> str | None:
    if easy is None or easy.tags is None:
        return None
    try:
        values = easy.tags.get(key)
    except (KeyError, ValueError):
        return None
    if not values:
        return None
    value = str(values[0]).strip()
    return value or None


def _pick_picture(pictures: list[Picture]) -> Picture | None:
    for picture in pictures:
        if picture.type == _FRONT_COVER_TYPE:
            return picture
    return pictures[0] if pictures else None


def _embedded_art(audio: Any) -> tuple[bytes | None, str | None]:
    """Find embedded cover art across the containers we care about."""
    if isinstance(audio, FLAC):
        picture = _pick_picture(list(audio.pictures))
        if picture is not None:
            return picture.data, picture.mime

    tags = audio.tags
    if tags is None:
        return None, None

    # ID3 (MP3, AIFF, WAV with ID3 chunk)
    if hasattr(tags, "getall"):
        frames = tags.getall("APIC")
        front = next((f for f in frames if f.type == _FRONT_COVER_TYPE), None)
        frame = front or (frames[0] if frames else None)
        if frame is not None:
            return frame.data, frame.mime

    # MP4 / M4A
    covers = tags.get("covr") if hasattr(tags, "get") else None
    if covers:
        cover = covers[0]
        mime = "image/png" if getattr(cover, "imageformat", None) == 14 else "image/jpeg"
        return bytes(cover), mime

    # Vorbis comments (OGG / OPUS)
    blocks = tags.get("metadata_block_picture") if hasattr(tags, "get") else None
    if blocks:
        try:
            picture = Picture(base64.b64decode(blocks[0]))
            return picture.data, picture.mime
        except (ValueError, mutagen.MutagenError):
            return None, None

    return None, None


def _stream_quality(audio: Any) -> dict[str, int | None]:
    info = getattr(audio, "info", None)
    bitrate = getattr(info, "bitrate", 0) or 0
    return {
        "bitrate": round(bitrate / 1000) if bitrate else None,
        "sample_rate": getattr(info, "sample_rate", None) or None,
        "channels": getattr(info, "channels", None) or None,
        "bit_depth": getattr(info, "bits_per_sample", None) or None,
    }


def read_tags(path: Path) -> LocalTags | None:
    """Blocking tag read. Returns None when mutagen can't parse the file."""
    audio = mutagen.File(path)
    if audio is None:
        return None
    easy = mutagen.File(path, easy=True)
    art, mime = _embedded_art(audio)

    return LocalTags(
        title=_first_text(easy, "title"),
        artist=_first_text(easy, "artist"),
        album=_first_text(easy, "album"),
        embedded_art=art or None,
        art_mime=mime if art else None,
        **_stream_quality(audio),
    )


class MutagenTagReader(ITagReader):
    """ITagReader backed by mutagen."""

    async def extract(self, file_uri: str) -> LocalTags | None:
        path = uri_to_path(file_uri)
        if path is None:
            logger.debug("No local path for %s, skipping tag read", file_uri)
            return None

        try:
            return await asyncio.to_thread(read_tags, path)
        except Exception as e:
            logger.debug("Tag read failed for %s: %s", path, e)
            return None


__all__ = ["MutagenTagReader", "read_tags", "uri_to_path"]
