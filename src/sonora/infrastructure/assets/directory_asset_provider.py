"""Asset provider that enumerates audio files under a local directory.

"Permission" here means the directory exists and is readable. Durations come
from mutagen's stream info; files mutagen can't parse still show up with a
duration of 0 so the user at least sees them.
"""

import asyncio
import hashlib
import logging
import os
from pathlib import Path

import mutagen

from sonora.domain.entities import AudioAsset
from sonora.domain.ports import IAssetProvider

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = frozenset(
    {".mp3", ".flac", ".wav", ".aiff", ".aif", ".m4a", ".aac", ".alac", ".ogg", ".opus", ".wma"}
)


def asset_id_for(path: Path) -> str:
    """Stable id for a file: it must survive rescans so cache entries keep matching."""
    return hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:16]


def _read_duration(path: Path) -> float:
    try:
        audio = mutagen.File(path)
    except Exception as e:
        logger.debug("Could not read duration of %s: %s", path, e)
        return 0.0
    length = getattr(getattr(audio, "info", None), "length", None)
    return float(length) if length else 0.0


def scan_directory(root: Path, limit: int) -> list[AudioAsset]:
    """Blocking scan: audio files below root in path order, at most ``limit``."""
    paths = sorted(
        path
        for path in root.rglob("*")
        if path.is_file() and path.suffix.lower() in AUDIO_EXTENSIONS
    )
    assets: list[AudioAsset] = []
    for path in paths[:limit]:
        assets.append(
            AudioAsset(
                id=asset_id_for(path),
                uri=path.resolve().as_uri(),
                filename=path.name,
                duration=_read_duration(path),
                file_size=path.stat().st_size,
            )
        )
    return assets


class DirectoryAssetProvider(IAssetProvider):
    """IAssetProvider over a music directory."""

    def __init__(self, music_dir: Path) -> None:
        self.music_dir = Path(music_dir)

    def _accessible(self) -> bool:
        return self.music_dir.is_dir() and os.access(self.music_dir, os.R_OK | os.X_OK)

    async def get_permission(self, granular: bool = True) -> bool:
        return self._accessible()

    async def request_permission(self, granular: bool = True) -> bool:
        # Nothing to prompt for on a server - it's readable or it isn't.
        return self._accessible()

    async def list_assets(self, limit: int = 500) -> list[AudioAsset]:
        assets = await asyncio.to_thread(scan_directory, self.music_dir, limit)
        logger.debug("Found %d audio files under %s", len(assets), self.music_dir)
        return assets


__all__ = ["AUDIO_EXTENSIONS", "DirectoryAssetProvider", "asset_id_for", "scan_directory"]
