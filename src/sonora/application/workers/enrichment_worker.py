"""Background metadata enrichment pipeline.

Hey future me - this is the heart of the library! It takes freshly scanned,
provisional tracks (filename titles, "Unknown Artist", estimated quality) and
upgrades them in the background without ever blocking playback or the UI.

Flow per run:
1. Partition: tracks already fetched or with ANY cache entry (positive or
   negative) are "resolved" - apply the cache and be done with them.
2. The rest is chopped into batches of 3 and pushed on a queue that ONE worker
   loop drains in order. Per track: tags -> title cleanup -> embedded art ->
   (no local art?) remote lookup -> remote art download -> cache entry.
3. After each batch: flush the cache, swap the new Track values into the index,
   notify the listener, then sleep 200ms so the rest of the app gets air.
4. When the queue is empty every input track has metadata_fetched=True.

Failure policy: one track blowing up NEVER aborts its batch. It just falls back
to heuristics (normalized filename title, estimated quality) and is marked
fetched. Only "local AND remote both found nothing" writes the negative
sentinel - transient crashes don't, so the next session retries them.

Concurrency: a second run while one is in flight is a no-op. A started run
drains its queue to the end unless stop() cancels it (app shutdown). Batches
already flushed stay cached; the interrupted batch is simply retried next run.
"""

import asyncio
import contextlib
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, replace

from sonora.application.cache.metadata_cache import MetadataStore
from sonora.application.services.metadata_merge import merge_metadata
from sonora.config.settings import EnrichmentSettings
from sonora.domain.entities import CacheEntry, LocalTags, MetadataResult, Track
from sonora.domain.ports import IArtworkStore, IMetadataResolver, ITagReader
from sonora.domain.value_objects.title_normalization import (
    normalize_title,
    strip_extension,
)
from sonora.infrastructure.observability.logging import set_run_id

logger = logging.getLogger(__name__)

TrackListener = Callable[[list[Track]], None]


@dataclass
class EnrichmentStats:
    """Counters for one enrichment run."""

    total: int = 0
    from_cache: int = 0
    resolved_local: int = 0
    resolved_remote: int = 0
    not_found: int = 0
    failed: int = 0
    batches: int = 0


class EnrichmentPipeline:
    """Single-worker, batch-at-a-time metadata enrichment.

    Construct ONE per process and keep a reference - the "only one run at a
    time" guard lives on the instance.
    """

    def __init__(
        self,
        cache: MetadataStore,
        tag_reader: ITagReader,
        artwork_store: IArtworkStore,
        resolver: IMetadataResolver,
        settings: EnrichmentSettings,
        on_update: TrackListener | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            cache: Metadata cache (loaded lazily on first run)
            tag_reader: Local tag extraction
            artwork_store: Artwork materialization
            resolver: Remote metadata lookup
            settings: Batch size / delay
            on_update: Called with the full, ordered track list after every applied batch
            sleep: Async sleep used for the inter-batch pause (injectable for tests)
        """
        self.cache = cache
        self.tag_reader = tag_reader
        self.artwork_store = artwork_store
        self.resolver = resolver
        self.settings = settings
        self.on_update = on_update
        self._sleep = sleep

        self._running = False
        self._task: asyncio.Task[EnrichmentStats] | None = None
        self._order: list[str] = []
        self._index: dict[str, Track] = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def tracks(self) -> list[Track]:
        """Latest track values of the current/last run, in input order."""
        return [self._index[track_id] for track_id in self._order]

    def start(self, tracks: Iterable[Track]) -> "asyncio.Task[EnrichmentStats] | None":
        """Kick off a background run.

        Returns:
            The task, or None if a run is already active (call ignored)
        """
        if self._running:
            logger.debug("Enrichment already running, ignoring start request")
            return None
        self._running = True
        self._task = asyncio.create_task(self._execute(list(tracks)))
        return self._task

    async def stop(self) -> None:
        """Cancel a background run started with start() and wait for it to unwind."""
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._running = False
        logger.info("Enrichment pipeline stopped")

    async def run(self, tracks: Iterable[Track]) -> EnrichmentStats | None:
        """Run enrichment to completion in the current task.

        Returns:
            Stats, or None if another run was already active (call ignored)
        """
        if self._running:
            logger.debug("Enrichment already running, ignoring run request")
            return None
        self._running = True
        return await self._execute(list(tracks))

    async def _execute(self, tracks: list[Track]) -> EnrichmentStats:
        set_run_id()
        try:
            return await self._enrich(tracks)
        finally:
            self._running = False

    async def _enrich(self, tracks: list[Track]) -> EnrichmentStats:
        stats = EnrichmentStats(total=len(tracks))
        await self.cache.load()

        self._order = [track.id for track in tracks]
        self._index = {track.id: track for track in tracks}

        pending: list[Track] = []
        for track in tracks:
            if track.metadata_fetched or self.cache.contains(track.id):
                self._index[track.id] = replace(
                    merge_metadata(track, self.cache.get(track.id)),
                    metadata_fetched=True,
                )
                stats.from_cache += 1
            else:
                pending.append(track)

        if stats.from_cache:
            self._publish()

        if not pending:
            logger.info("Enrichment: all %d tracks served from cache", len(tracks))
            return stats

        logger.info(
            "Enrichment started: %d tracks to resolve (%d from cache)",
            len(pending),
            stats.from_cache,
        )

        size = self.settings.batch_size
        batches: deque[list[Track]] = deque(
            pending[i : i + size] for i in range(0, len(pending), size)
        )

        while batches:
            batch = batches.popleft()
            learned = await self._process_batch(batch, stats)
            stats.batches += 1

            await self.cache.flush()
            for track in batch:
                current = self._index.get(track.id, track)
                self._index[track.id] = replace(
                    merge_metadata(current, learned.get(track.id)),
                    metadata_fetched=True,
                )
            self._publish()

            if batches:
                await self._sleep(self.settings.batch_delay)

        logger.info(
            "Enrichment finished: %d local, %d remote, %d not found, %d failed in %d batches",
            stats.resolved_local,
            stats.resolved_remote,
            stats.not_found,
            stats.failed,
            stats.batches,
        )
        return stats

    async def _process_batch(
        self, batch: list[Track], stats: EnrichmentStats
    ) -> dict[str, CacheEntry | None]:
        learned: dict[str, CacheEntry | None] = {}
        for track in batch:
            try:
                entry = await self._enrich_track(track, stats)
            except Exception:
                # Isolation boundary: this track degrades to heuristics, siblings carry on.
                logger.warning("Enrichment failed for track %s", track.id, exc_info=True)
                stats.failed += 1
                learned[track.id] = None
                continue
            self.cache.put(track.id, entry)
            learned[track.id] = entry
        return learned

    async def _enrich_track(self, track: Track, stats: EnrichmentStats) -> CacheEntry:
        tags = await self.tag_reader.extract(track.uri) if track.uri else None
        has_local = tags is not None and not tags.is_empty

        raw_title = (tags.title if tags else None) or strip_extension(track.filename)
        title = normalize_title(raw_title) or track.title

        artwork: str | None = None
        if tags is not None and tags.embedded_art:
            artwork = await self.artwork_store.materialize_embedded(
                tags.embedded_art, track.id, tags.art_mime
            )

        remote: MetadataResult | None = None
        if artwork is None:
            artist_hint = (tags.artist if tags else None) or track.artist
            remote = await self.resolver.resolve(title, artist_hint)
            if remote is not None and remote.cover_art:
                artwork = (
                    await self.artwork_store.materialize_remote(remote.cover_art, track.id)
                    or remote.cover_art
                )

        if not has_local and remote is None:
            stats.not_found += 1
            return CacheEntry.negative()

        if remote is not None:
            stats.resolved_remote += 1
        else:
            stats.resolved_local += 1

        return self._build_entry(title, tags, remote, artwork)

    @staticmethod
    def _build_entry(
        title: str,
        tags: LocalTags | None,
        remote: MetadataResult | None,
        artwork: str | None,
    ) -> CacheEntry:
        # Tag text is authoritative for the file; remote fills the gaps. A title
        # that only came from the file name loses to the remote title.
        tag_title = normalize_title(tags.title) if tags and tags.title else None
        quality = tags.quality if tags else None

        return CacheEntry(
            title=tag_title or (remote.title if remote else None) or title,
            artist=(tags.artist if tags else None) or (remote.artist if remote else None),
            album=(tags.album if tags else None) or (remote.album if remote else None),
            cover_art=artwork,
            year=remote.year if remote else None,
            bitrate=quality.bitrate if quality else None,
            sample_rate=quality.sample_rate if quality else None,
            bit_depth=quality.bit_depth if quality else None,
            channels=quality.channels if quality else None,
        )

    def _publish(self) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(self.tracks)
        except Exception:
            logger.exception("Enrichment update listener failed")


__all__ = ["EnrichmentPipeline", "EnrichmentStats", "TrackListener"]
