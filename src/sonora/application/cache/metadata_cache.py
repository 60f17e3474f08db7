"""Persistent track-id -> CacheEntry store for enrichment results.

Hey future me - the WHOLE cache is one JSON document stored under a versioned
key ("track_metadata_v3"). load() reads it once, get()/put() work on the
in-memory map, flush() writes the full map back in a single storage write.

The three states of a track id matter:
- get() returns None              -> never tried, enrich it
- entry with not_found=True       -> tried and gave up, DON'T retry this epoch
- any other entry                 -> resolved, apply it

There is no TTL and no eviction. To retry everything (e.g. after improving the
resolver), bump EnrichmentSettings.cache_version - the old document is simply
never read again.
"""

import json
import logging

from sonora.domain.entities import CacheEntry
from sonora.domain.ports import IKeyValueStorage

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "track_metadata"


def cache_storage_key(version: int) -> str:
    """Storage key for a cache epoch."""
    return f"{CACHE_KEY_PREFIX}_v{version}"


class MetadataStore:
    """Explicitly constructed metadata cache (no hidden global state)."""

    def __init__(self, storage: IKeyValueStorage, version: int) -> None:
        """
        Args:
            storage: Durable key-value storage
            version: Cache epoch; part of the storage key
        """
        self.storage = storage
        self.version = version
        self._entries: dict[str, CacheEntry] = {}
        self._loaded = False

    @property
    def storage_key(self) -> str:
        return cache_storage_key(self.version)

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        """Read the stored document into memory (only the first call does I/O).

        A corrupt or unreadable document is treated as an empty cache - worst
        case we re-enrich, which is far better than blocking the library.
        """
        if self._loaded:
            return

        entries: dict[str, CacheEntry] = {}
        try:
            raw = await self.storage.get_item(self.storage_key)
        except Exception as e:
            logger.warning("Could not read metadata cache %s: %s", self.storage_key, e)
            raw = None

        if raw:
            try:
                document = json.loads(raw)
            except ValueError as e:
                logger.warning("Metadata cache %s is corrupt, starting empty: %s", self.storage_key, e)
                document = {}
            if isinstance(document, dict):
                for track_id, data in document.items():
                    if isinstance(data, dict):
                        entries[str(track_id)] = CacheEntry.from_dict(data)

        self._entries = entries
        self._loaded = True
        logger.debug("Loaded %d metadata cache entries from %s", len(entries), self.storage_key)

    def get(self, track_id: str) -> CacheEntry | None:
        """Cached entry, or None if this track was never attempted."""
        return self._entries.get(track_id)

    def contains(self, track_id: str) -> bool:
        return track_id in self._entries

    def put(self, track_id: str, entry: CacheEntry) -> None:
        """Insert or overwrite an entry (in memory until flush())."""
        self._entries[track_id] = entry

    def __len__(self) -> int:
        return len(self._entries)

    async def flush(self) -> bool:
        """Persist the full map in one write.

        Returns:
            True on success. Failures are logged and swallowed - the in-memory
            map stays authoritative and the next flush tries again.
        """
        document = {track_id: entry.to_dict() for track_id, entry in self._entries.items()}
        try:
            await self.storage.set_item(self.storage_key, json.dumps(document))
        except Exception as e:
            logger.warning("Failed to flush metadata cache (%d entries): %s", len(document), e)
            return False
        return True


__all__ = ["CACHE_KEY_PREFIX", "MetadataStore", "cache_storage_key"]
