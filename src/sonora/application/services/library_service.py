"""Library service - permission gate, scan and enrichment kick-off.

Hey future me - this is the piece the outside world talks to. It:
1. Checks/requests media permission. Some platforms blow up on the granular
   "audio only" request, so we retry once with the plain request before giving up.
   Denied = has_permission False, no scan, no enrichment. Never an exception.
2. Scans assets into PROVISIONAL tracks (normalized filename title, Unknown
   Artist/Album, format from extension, estimated quality) and applies whatever
   the cache already knows.
3. Falls back to the demo library when there's no asset provider or the scan fails.
4. Starts the enrichment pipeline and swaps in every batch update it publishes,
   then tells its own listeners (playback controller, API, ...).
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace

from sonora.application.cache.metadata_cache import MetadataStore
from sonora.application.services.demo_library import demo_tracks
from sonora.application.services.library_index import LibraryIndex
from sonora.application.services.metadata_merge import (
    merge_metadata,
    with_heuristic_defaults,
)
from sonora.application.workers.enrichment_worker import (
    EnrichmentPipeline,
    EnrichmentStats,
)
from sonora.domain.entities import Album, Artist, AudioAsset, CacheEntry, Track
from sonora.domain.ports import IAssetProvider
from sonora.domain.value_objects.quality import format_from_filename
from sonora.domain.value_objects.title_normalization import title_from_filename

logger = logging.getLogger(__name__)

LibraryListener = Callable[[tuple[Track, ...]], None]

DEFAULT_SCAN_LIMIT = 500


def build_provisional_track(asset: AudioAsset, cached: CacheEntry | None = None) -> Track:
    """Scan-time track for an asset.

    Uncached assets get a normalized title and estimated quality right away, so
    they are browsable before their enrichment batch runs. Cached knowledge is
    applied when present.
    """
    track = Track(
        id=asset.id,
        uri=asset.uri,
        title=title_from_filename(asset.filename),
        filename=asset.filename,
        duration=asset.duration,
        format=format_from_filename(asset.filename),
        file_size=asset.file_size,
    )
    if cached is None:
        return with_heuristic_defaults(track)
    return replace(merge_metadata(track, cached), metadata_fetched=True)


class LibraryService:
    """Owns the current track list and its derived albums/artists."""

    def __init__(
        self,
        cache: MetadataStore,
        pipeline: EnrichmentPipeline,
        provider: IAssetProvider | None = None,
        scan_limit: int = DEFAULT_SCAN_LIMIT,
    ) -> None:
        """
        Args:
            cache: Metadata cache used to pre-apply known metadata at scan time
            pipeline: Enrichment pipeline (its update callback is taken over here)
            provider: Device asset provider; None means "no device library", demo mode
            scan_limit: Max assets per scan
        """
        self.cache = cache
        self.pipeline = pipeline
        self.provider = provider
        self.scan_limit = scan_limit

        self.has_permission = False
        self.is_loading = True
        self.is_demo = False
        self._tracks: tuple[Track, ...] = ()
        self._index = LibraryIndex()
        self._listeners: list[LibraryListener] = []
        self._enrichment_task: asyncio.Task[EnrichmentStats] | None = None

        self.pipeline.on_update = self._apply_enrichment_update

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self._tracks

    @property
    def albums(self) -> list[Album]:
        self._index.update(self._tracks)
        return self._index.albums

    @property
    def artists(self) -> list[Artist]:
        self._index.update(self._tracks)
        return self._index.artists

    def find_track(self, track_id: str) -> Track | None:
        return next((track for track in self._tracks if track.id == track_id), None)

    def find_album(self, album_id: str) -> Album | None:
        self._index.update(self._tracks)
        return self._index.find_album(album_id)

    def find_artist(self, artist_id: str) -> Artist | None:
        self._index.update(self._tracks)
        return self._index.find_artist(artist_id)

    def subscribe(self, listener: LibraryListener) -> None:
        """Register a callback invoked with the new track tuple on every change."""
        self._listeners.append(listener)

    @property
    def enrichment_task(self) -> "asyncio.Task[EnrichmentStats] | None":
        return self._enrichment_task

    async def initialize(self) -> None:
        """Startup: check the existing permission (no prompt) and scan if granted."""
        if self.provider is None:
            self.has_permission = True
            self._load_demo()
            return

        self.has_permission = await self._ask(self.provider.get_permission)
        if self.has_permission:
            await self.scan()
        else:
            self.is_loading = False

    async def request_permission(self) -> bool:
        """Prompt for media access and scan on success."""
        if self.provider is None:
            self.has_permission = True
            self._load_demo()
            return True

        self.has_permission = await self._ask(self.provider.request_permission)
        if self.has_permission:
            await self.scan()
        else:
            self.is_loading = False
        return self.has_permission

    async def _ask(self, call: Callable[[bool], Awaitable[bool]]) -> bool:
        try:
            return await call(True)
        except Exception as e:
            logger.warning("Granular audio permission failed, trying fallback: %s", e)
        try:
            return await call(False)
        except Exception as e:
            logger.warning("All media permission attempts failed: %s", e)
            return False

    async def scan(self) -> tuple[Track, ...]:
        """Rebuild the library from the asset provider and kick off enrichment.

        Falls back to the demo library when scanning fails.
        """
        if self.provider is None:
            self._load_demo()
            return self._tracks

        self.is_loading = True
        try:
            assets = await self.provider.list_assets(limit=self.scan_limit)
            await self.cache.load()
            tracks = tuple(
                build_provisional_track(asset, self.cache.get(asset.id)) for asset in assets
            )
        except Exception as e:
            logger.warning("Scan failed, using demo data: %s", e)
            self._load_demo()
            return self._tracks

        self.is_demo = False
        self._set_tracks(tracks)
        self.is_loading = False
        logger.info(
            "Scanned %d tracks (%d already known)",
            len(tracks),
            sum(1 for track in tracks if track.metadata_fetched),
        )
        self.start_enrichment()
        return self._tracks

    def start_enrichment(self) -> "asyncio.Task[EnrichmentStats] | None":
        """Start background enrichment for tracks still lacking metadata."""
        if not self.has_permission or self.is_demo:
            return None
        if all(track.metadata_fetched for track in self._tracks):
            return None
        task = self.pipeline.start(self._tracks)
        if task is not None:
            self._enrichment_task = task
        return task

    def _load_demo(self) -> None:
        self.is_demo = True
        self._set_tracks(demo_tracks())
        self.is_loading = False

    def _apply_enrichment_update(self, tracks: list[Track]) -> None:
        # Enrichment only knows the ids it was started with; anything scanned
        # since keeps its current value.
        updated = {track.id: track for track in tracks}
        self._set_tracks(tuple(updated.get(track.id, track) for track in self._tracks))

    def _set_tracks(self, tracks: Iterable[Track]) -> None:
        self._tracks = tuple(tracks)
        for listener in self._listeners:
            try:
                listener(self._tracks)
            except Exception:
                logger.exception("Library listener failed")


__all__ = ["DEFAULT_SCAN_LIMIT", "LibraryService", "build_provisional_track"]
