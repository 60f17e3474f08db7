"""Tests for the metadata search endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sonora.api.dependencies import get_metadata_resolver
from sonora.config.settings import Settings
from sonora.domain.entities import MetadataResult
from sonora.main import create_app

FOUND = MetadataResult(
    title="Song",
    artist="Artist",
    album="Album",
    year="2001",
    cover_art="https://coverartarchive.org/release/rel-1/front-250",
    mbid="rec-1",
    release_id="rel-1",
)


@pytest.fixture
def metadata_resolver() -> MagicMock:
    resolver = MagicMock()
    resolver.resolve_by_title_artist = AsyncMock(return_value=FOUND)
    return resolver


@pytest.fixture
def app(metadata_resolver: MagicMock) -> FastAPI:
    # No "with TestClient(...)", so the lifespan (DB, real HTTP clients) never runs.
    app = create_app(Settings(_env_file=None))
    app.dependency_overrides[get_metadata_resolver] = lambda: metadata_resolver
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestSearchMetadata:
    def test_found_is_camel_case(self, client: TestClient, metadata_resolver: MagicMock) -> None:
        response = client.get("/api/metadata/search", params={"title": "Song", "artist": "Artist"})

        assert response.status_code == 200
        assert response.json() == {
            "title": "Song",
            "artist": "Artist",
            "album": "Album",
            "year": "2001",
            "coverArt": "https://coverartarchive.org/release/rel-1/front-250",
            "mbid": "rec-1",
            "releaseId": "rel-1",
        }
        metadata_resolver.resolve_by_title_artist.assert_awaited_once_with("Song", "Artist")

    def test_artist_is_optional(self, client: TestClient, metadata_resolver: MagicMock) -> None:
        client.get("/api/metadata/search", params={"title": "Song"})

        metadata_resolver.resolve_by_title_artist.assert_awaited_once_with("Song", "")

    def test_not_found(self, client: TestClient, metadata_resolver: MagicMock) -> None:
        metadata_resolver.resolve_by_title_artist.return_value = None

        response = client.get("/api/metadata/search", params={"title": "Nothing"})

        assert response.status_code == 404
        assert response.json() == {"error": "No metadata found"}

    @pytest.mark.parametrize("params", [{}, {"title": "   "}, {"artist": "Artist"}])
    def test_missing_title_is_400(
        self, client: TestClient, metadata_resolver: MagicMock, params: dict[str, str]
    ) -> None:
        response = client.get("/api/metadata/search", params=params)

        assert response.status_code == 400
        assert response.json() == {"error": "title query parameter is required"}
        metadata_resolver.resolve_by_title_artist.assert_not_awaited()

    def test_resolver_not_initialized_is_503(self) -> None:
        client = TestClient(create_app(Settings(_env_file=None)))

        response = client.get("/api/metadata/search", params={"title": "Song"})

        assert response.status_code == 503


class TestBatchMetadata:
    def test_results_keyed_by_id_misses_omitted(
        self, client: TestClient, metadata_resolver: MagicMock
    ) -> None:
        metadata_resolver.resolve_by_title_artist.side_effect = [FOUND, None]

        response = client.post(
            "/api/metadata/batch",
            json={"tracks": [{"id": "a", "title": "Song", "artist": "Artist"}, {"id": "b", "title": "Miss"}]},
        )

        assert response.status_code == 200
        results = response.json()["results"]
        assert list(results) == ["a"]
        assert results["a"]["releaseId"] == "rel-1"

    def test_only_first_ten_are_processed(
        self, client: TestClient, metadata_resolver: MagicMock
    ) -> None:
        tracks = [{"id": str(i), "title": f"Song {i}"} for i in range(15)]

        response = client.post("/api/metadata/batch", json={"tracks": tracks})

        assert metadata_resolver.resolve_by_title_artist.await_count == 10
        assert sorted(response.json()["results"], key=int) == [str(i) for i in range(10)]

    def test_blank_titles_are_skipped(self, client: TestClient, metadata_resolver: MagicMock) -> None:
        response = client.post("/api/metadata/batch", json={"tracks": [{"id": "x", "title": " "}]})

        assert response.json() == {"results": {}}
        metadata_resolver.resolve_by_title_artist.assert_not_awaited()

    def test_empty_body_is_empty_result(self, client: TestClient) -> None:
        response = client.post("/api/metadata/batch", json={})

        assert response.status_code == 200
        assert response.json() == {"results": {}}

    def test_malformed_body_is_400_error_shape(self, client: TestClient) -> None:
        response = client.post("/api/metadata/batch", json={"tracks": "nope"})

        assert response.status_code == 400
        assert "error" in response.json()
