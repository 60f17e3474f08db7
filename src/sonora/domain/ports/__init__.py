"""Domain ports (interfaces) for dependency inversion.

Hey future me - everything the core talks to but does NOT own lives behind one
of these ABCs: device storage, the tag reader, the asset enumerator, the audio
engine and the remote resolver. Infrastructure implements them, tests fake
them. The core never imports an implementation directly.
"""

from abc import ABC, abstractmethod

from sonora.domain.entities import AudioAsset, LocalTags, MetadataResult


class IKeyValueStorage(ABC):
    """String-keyed, string-valued durable storage."""

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Get a stored value or None if the key is absent."""
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store (overwrite) a value in a single atomic write."""
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove a key (no-op when absent)."""
        pass


class ITagReader(ABC):
    """Reads embedded tags from an audio file."""

    @abstractmethod
    async def extract(self, file_uri: str) -> LocalTags | None:
        """Read tags. Any failure returns None - never raises."""
        pass


class IArtworkStore(ABC):
    """Persists cover art locally and hands back a stable reference."""

    @abstractmethod
    async def materialize_embedded(
        self, data: bytes, track_id: str, mime: str | None = None
    ) -> str | None:
        """Write embedded art bytes; None on write failure."""
        pass

    @abstractmethod
    async def materialize_remote(self, url: str, track_id: str) -> str | None:
        """Download remote art; None on non-2xx or network failure."""
        pass


class IMetadataResolver(ABC):
    """Remote metadata lookup."""

    @abstractmethod
    async def resolve(
        self, title: str, artist: str | None = None
    ) -> MetadataResult | None:
        """Resolve by title+artist, relaxing the query when that fails."""
        pass


class IAssetProvider(ABC):
    """Device audio-asset enumerator (external collaborator)."""

    @abstractmethod
    async def get_permission(self, granular: bool = True) -> bool:
        """Check whether media access is already granted."""
        pass

    @abstractmethod
    async def request_permission(self, granular: bool = True) -> bool:
        """Ask for media access. May raise if granular audio access is unsupported."""
        pass

    @abstractmethod
    async def list_assets(self, limit: int = 500) -> list[AudioAsset]:
        """Enumerate audio assets."""
        pass


class IPlaybackEngine(ABC):
    """Black-box audio engine. One loaded sound at a time."""

    @abstractmethod
    async def load(self, uri: str) -> None:
        """Load a uri and start playing it."""
        pass

    @abstractmethod
    async def pause(self) -> None:
        pass

    @abstractmethod
    async def resume(self) -> None:
        pass

    @abstractmethod
    async def seek(self, position: float) -> None:
        """Seek to a position in seconds."""
        pass

    @abstractmethod
    async def unload(self) -> None:
        """Stop and release the current sound (no-op when none is loaded)."""
        pass


__all__ = [
    "IArtworkStore",
    "IAssetProvider",
    "IKeyValueStorage",
    "IMetadataResolver",
    "IPlaybackEngine",
    "ITagReader",
]
