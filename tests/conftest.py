"""Shared fixtures: settings and in-process fakes for every domain port."""

from typing import Any

import pytest

from sonora.application.cache.metadata_cache import MetadataStore
from sonora.config.settings import EnrichmentSettings, MusicBrainzSettings
from sonora.domain.entities import AudioAsset, LocalTags, MetadataResult, Track
from sonora.domain.ports import (
    IArtworkStore,
    IAssetProvider,
    IMetadataResolver,
    IPlaybackEngine,
    ITagReader,
)
from sonora.infrastructure.persistence import InMemoryKeyValueStorage


class FakeClock:
    """Manual monotonic clock; sleep() advances it instead of waiting."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeTagReader(ITagReader):
    """Returns canned tags per uri. An Exception value is raised instead."""

    def __init__(self, tags: dict[str, Any] | None = None) -> None:
        self.tags = tags or {}
        self.calls: list[str] = []

    async def extract(self, file_uri: str) -> LocalTags | None:
        self.calls.append(file_uri)
        value = self.tags.get(file_uri)
        if isinstance(value, Exception):
            raise value
        return value


class FakeArtworkStore(IArtworkStore):
    def __init__(self, remote_ok: bool = True) -> None:
        self.remote_ok = remote_ok
        self.embedded: list[str] = []
        self.remote: list[tuple[str, str]] = []

    async def materialize_embedded(
        self, data: bytes, track_id: str, mime: str | None = None
    ) -> str | None:
        self.embedded.append(track_id)
        return f"file:///art/art_v3_{track_id}.jpg"

    async def materialize_remote(self, url: str, track_id: str) -> str | None:
        self.remote.append((url, track_id))
        if not self.remote_ok:
            return None
        return f"file:///art/remote_v3_{track_id}.jpg"


class FakeResolver(IMetadataResolver):
    """Resolves titles from a dict; records every (title, artist) query."""

    def __init__(self, results: dict[str, Any] | None = None) -> None:
        self.results = results or {}
        self.calls: list[tuple[str, str | None]] = []

    async def resolve(self, title: str, artist: str | None = None) -> MetadataResult | None:
        self.calls.append((title, artist))
        value = self.results.get(title)
        if isinstance(value, Exception):
            raise value
        return value


class FakePlaybackEngine(IPlaybackEngine):
    """Records engine calls; uris in ``failing`` raise on load."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[tuple[str, Any]] = []
        self.loaded: str | None = None

    async def load(self, uri: str) -> None:
        self.calls.append(("load", uri))
        if uri in self.failing:
            raise RuntimeError(f"cannot decode {uri}")
        self.loaded = uri

    async def pause(self) -> None:
        self.calls.append(("pause", None))

    async def resume(self) -> None:
        self.calls.append(("resume", None))

    async def seek(self, position: float) -> None:
        self.calls.append(("seek", position))

    async def unload(self) -> None:
        self.calls.append(("unload", None))
        self.loaded = None


class FakeAssetProvider(IAssetProvider):
    """Configurable permission answers and asset list."""

    def __init__(
        self,
        assets: list[AudioAsset] | None = None,
        granted: bool = True,
        granular_raises: bool = False,
        list_raises: bool = False,
    ) -> None:
        self.assets = assets or []
        self.granted = granted
        self.granular_raises = granular_raises
        self.list_raises = list_raises
        self.permission_calls: list[tuple[str, bool]] = []

    def _answer(self, kind: str, granular: bool) -> bool:
        self.permission_calls.append((kind, granular))
        if granular and self.granular_raises:
            raise RuntimeError("granular audio permission unsupported")
        return self.granted

    async def get_permission(self, granular: bool = True) -> bool:
        return self._answer("get", granular)

    async def request_permission(self, granular: bool = True) -> bool:
        return self._answer("request", granular)

    async def list_assets(self, limit: int = 500) -> list[AudioAsset]:
        if self.list_raises:
            raise OSError("media store unavailable")
        return self.assets[:limit]


def make_track(track_id: str, filename: str | None = None, **overrides: Any) -> Track:
    """Provisional track the way a scan produces it."""
    filename = filename or f"track_{track_id}.mp3"
    fields: dict[str, Any] = {
        "id": track_id,
        "uri": f"file:///music/{filename}",
        "title": filename.rsplit(".", 1)[0].replace("_", " "),
        "filename": filename,
        "duration": 200.0,
        "format": "MP3",
    }
    fields.update(overrides)
    return Track(**fields)


@pytest.fixture
def track_factory():
    return make_track


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def metadata_store(storage: InMemoryKeyValueStorage) -> MetadataStore:
    return MetadataStore(storage, version=3)


@pytest.fixture
def enrichment_settings() -> EnrichmentSettings:
    return EnrichmentSettings(batch_size=3, batch_delay=0.2, cache_version=3)


@pytest.fixture
def musicbrainz_settings() -> MusicBrainzSettings:
    """Create MusicBrainz settings for testing."""
    return MusicBrainzSettings(
        app_name="TestApp",
        app_version="1.0.0",
        contact="test@example.com",
    )


@pytest.fixture
def tag_reader() -> FakeTagReader:
    return FakeTagReader()


@pytest.fixture
def artwork_store() -> FakeArtworkStore:
    return FakeArtworkStore()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def playback_engine() -> FakePlaybackEngine:
    return FakePlaybackEngine()


@pytest.fixture
def asset_provider() -> FakeAssetProvider:
    return FakeAssetProvider()
