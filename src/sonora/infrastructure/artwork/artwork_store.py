"""Local artwork persistence.

Hey future me - file names carry the cache version ("art_v3_<id>.jpg"), so
bumping the version never collides with (or silently reuses) art written by an
older pipeline. Track ids come from the device and can contain anything, so they
get sanitized before they touch the file system.

Both materialize_* methods return a file:// reference or None. They never raise.
"""

import asyncio
import logging
import re
from pathlib import Path

import httpx

from sonora.domain.ports import IArtworkStore

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")

_MIME_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def safe_file_id(track_id: str) -> str:
    """Make a track id usable as a file name."""
    return _UNSAFE_CHARS.sub("_", track_id) or "track"


def sniff_extension(data: bytes) -> str:
    """Guess the image extension from magic bytes (jpg when unsure)."""
    if data.startswith(b"\x89PNG"):
        return "png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    if data.startswith(b"GIF8"):
        return "gif"
    return "jpg"


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_bytes(data)
    tmp.replace(path)


class ArtworkStore(IArtworkStore):
    """Writes cover art under a per-version, per-track file name."""

    DOWNLOAD_TIMEOUT = 30.0

    def __init__(
        self,
        artwork_dir: Path,
        version: int,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            artwork_dir: Directory for artwork files (created on demand)
            version: Cache epoch, embedded in file names
            client: Optional HTTP client for remote downloads
        """
        self.artwork_dir = Path(artwork_dir)
        self.version = version
        self._client = client
        self._owns_client = client is None

    def embedded_path(self, track_id: str, extension: str) -> Path:
        return self.artwork_dir / f"art_v{self.version}_{safe_file_id(track_id)}.{extension}"

    def remote_path(self, track_id: str) -> Path:
        return self.artwork_dir / f"remote_v{self.version}_{safe_file_id(track_id)}.jpg"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.DOWNLOAD_TIMEOUT, follow_redirects=True
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client (only if we created it)."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def materialize_embedded(
        self, data: bytes, track_id: str, mime: str | None = None
    ) -> str | None:
        """Write embedded art bytes to disk.

        Args:
            data: Raw image bytes from the tag
            track_id: Owning track id
            mime: Optional MIME type from the tag (magic bytes win when absent)

        Returns:
            file:// reference, or None on empty data or write failure
        """
        if not data:
            return None

        extension = _MIME_EXTENSIONS.get((mime or "").lower()) or sniff_extension(data)
        path = self.embedded_path(track_id, extension)
        try:
            await asyncio.to_thread(_write_bytes, path, data)
        except OSError as e:
            logger.warning("Could not write embedded artwork for %s: %s", track_id, e)
            return None
        return path.resolve().as_uri()

    async def materialize_remote(self, url: str, track_id: str) -> str | None:
        """Download remote art to disk.

        Returns:
            file:// reference, or None on non-2xx, network or write failure
        """
        if not url:
            return None

        client = await self._get_client()
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.debug("Artwork download failed for %s: %s", url, e)
            return None

        if not response.is_success or not response.content:
            logger.debug("Artwork download for %s returned HTTP %d", url, response.status_code)
            return None

        path = self.remote_path(track_id)
        try:
            await asyncio.to_thread(_write_bytes, path, response.content)
        except OSError as e:
            logger.warning("Could not write downloaded artwork for %s: %s", track_id, e)
            return None
        return path.resolve().as_uri()


__all__ = ["ArtworkStore", "safe_file_id", "sniff_extension"]
