"""Domain entities.

Hey future me - Track is FROZEN on purpose! Enrichment never mutates a track in
place, it builds a new value with dataclasses.replace() and swaps it into the
id -> Track index. Album and Artist are pure aggregates recomputed from the
track list (see application/services/library_index.py), they have no lifecycle
of their own and are never persisted.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"


class RepeatMode(str, Enum):
    """Repeat policy for the playback queue."""

    OFF = "off"
    ALL = "all"
    ONE = "one"


class PlaybackState(str, Enum):
    """Playback controller states."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


class QualityTier(str, Enum):
    """Coarse audio quality classification used for UI badges."""

    LOSSLESS = "lossless"
    HIGH = "high"
    STANDARD = "standard"
    LOW = "low"


@dataclass(frozen=True)
class QualityEstimate:
    """Complete bitrate/sample-rate/bit-depth/channels quadruple."""

    bitrate: int
    sample_rate: int
    bit_depth: int
    channels: int


@dataclass(frozen=True)
class Track:
    """A single playable audio item.

    duration, filename and format are fixed at scan time. The quality fields
    (bitrate, sample_rate, bit_depth, channels) are either all None or all set.
    metadata_fetched flips to True once enrichment made its final attempt.
    """

    id: str
    uri: str
    title: str
    filename: str
    duration: float
    format: str
    artist: str = UNKNOWN_ARTIST
    album: str = UNKNOWN_ALBUM
    artwork: str | None = None
    year: str | None = None
    bitrate: int | None = None
    sample_rate: int | None = None
    bit_depth: int | None = None
    channels: int | None = None
    file_size: int | None = None
    metadata_fetched: bool = False

    @property
    def has_quality(self) -> bool:
        """True when the quality quadruple is populated."""
        return self.bitrate is not None

    def with_quality(self, quality: QualityEstimate) -> "Track":
        """Return a copy carrying the given quality quadruple."""
        return replace(
            self,
            bitrate=quality.bitrate,
            sample_rate=quality.sample_rate,
            bit_depth=quality.bit_depth,
            channels=quality.channels,
        )


@dataclass
class Album:
    """Derived album aggregate keyed by (album name, artist name)."""

    id: str
    name: str
    artist: str
    artwork: str | None = None
    year: str | None = None
    tracks: list[Track] = field(default_factory=list)


@dataclass
class Artist:
    """Derived artist aggregate keyed by artist name."""

    id: str
    name: str
    artwork: str | None = None
    track_count: int = 0
    albums: list[Album] = field(default_factory=list)


@dataclass(frozen=True)
class AudioAsset:
    """Raw file handle handed over by the device asset provider."""

    id: str
    uri: str
    filename: str
    duration: float
    file_size: int | None = None


@dataclass(frozen=True)
class LocalTags:
    """Tags (and real stream info, when readable) embedded in an audio file."""

    title: str | None = None
    artist: str | None = None
    album: str | None = None
    embedded_art: bytes | None = None
    art_mime: str | None = None
    bitrate: int | None = None
    sample_rate: int | None = None
    bit_depth: int | None = None
    channels: int | None = None

    @property
    def is_empty(self) -> bool:
        """True when no text tag and no artwork was found."""
        return not (self.title or self.artist or self.album or self.embedded_art)

    @property
    def quality(self) -> QualityEstimate | None:
        """Real stream quality, only when the file exposed a usable bitrate and rate."""
        if not self.bitrate or not self.sample_rate:
            return None
        return QualityEstimate(
            bitrate=self.bitrate,
            sample_rate=self.sample_rate,
            bit_depth=self.bit_depth or 16,
            channels=self.channels or 2,
        )


@dataclass(frozen=True)
class MetadataResult:
    """Best-effort metadata from the remote recording database."""

    title: str
    artist: str
    album: str | None = None
    year: str | None = None
    cover_art: str | None = None
    mbid: str | None = None
    release_id: str | None = None


# Keys of the persisted cache document. "_notFound" is the negative sentinel.
_CACHE_FIELDS = (
    "title",
    "artist",
    "album",
    "cover_art",
    "year",
    "bitrate",
    "sample_rate",
    "bit_depth",
    "channels",
)
NOT_FOUND_KEY = "_notFound"


@dataclass(frozen=True)
class CacheEntry:
    """Persisted enrichment outcome for one track id.

    A missing entry means "never tried". An entry with not_found=True means
    "tried, both local and remote came back empty - don't retry this epoch".
    """

    title: str | None = None
    artist: str | None = None
    album: str | None = None
    cover_art: str | None = None
    year: str | None = None
    bitrate: int | None = None
    sample_rate: int | None = None
    bit_depth: int | None = None
    channels: int | None = None
    not_found: bool = False

    @classmethod
    def negative(cls) -> "CacheEntry":
        """Entry recording a definitive lookup failure."""
        return cls(not_found=True)

    @property
    def quality(self) -> QualityEstimate | None:
        """Cached quality quadruple, only when complete."""
        if None in (self.bitrate, self.sample_rate, self.bit_depth, self.channels):
            return None
        return QualityEstimate(
            bitrate=self.bitrate,  # type: ignore[arg-type]
            sample_rate=self.sample_rate,  # type: ignore[arg-type]
            bit_depth=self.bit_depth,  # type: ignore[arg-type]
            channels=self.channels,  # type: ignore[arg-type]
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape stored on disk (None fields omitted)."""
        data: dict[str, Any] = {
            name: getattr(self, name)
            for name in _CACHE_FIELDS
            if getattr(self, name) is not None
        }
        if self.not_found:
            data[NOT_FOUND_KEY] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntry":
        """Parse a stored entry, ignoring unknown keys and wrong types."""
        kwargs: dict[str, Any] = {}
        for name in ("title", "artist", "album", "cover_art", "year"):
            value = data.get(name)
            if isinstance(value, str):
                kwargs[name] = value
        for name in ("bitrate", "sample_rate", "bit_depth", "channels"):
            value = data.get(name)
            if isinstance(value, int) and not isinstance(value, bool):
                kwargs[name] = value
        return cls(not_found=bool(data.get(NOT_FOUND_KEY, False)), **kwargs)


__all__ = [
    "NOT_FOUND_KEY",
    "UNKNOWN_ALBUM",
    "UNKNOWN_ARTIST",
    "Album",
    "Artist",
    "AudioAsset",
    "CacheEntry",
    "LocalTags",
    "MetadataResult",
    "PlaybackState",
    "QualityEstimate",
    "QualityTier",
    "RepeatMode",
    "Track",
]
