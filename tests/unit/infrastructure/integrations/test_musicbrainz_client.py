"""Tests for MusicBrainz client implementation."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from sonora.config.settings import MusicBrainzSettings
from sonora.infrastructure.integrations.musicbrainz_client import (
    MusicBrainzClient,
    build_recording_query,
)


@pytest.fixture
def fetcher() -> MagicMock:
    fetcher = MagicMock()
    fetcher.fetch = AsyncMock()
    return fetcher


@pytest.fixture
def musicbrainz_client(musicbrainz_settings: MusicBrainzSettings, fetcher: MagicMock) -> MusicBrainzClient:
    """Create MusicBrainz client for testing."""
    return MusicBrainzClient(musicbrainz_settings, fetcher)


def _response(payload: object) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    return response


class TestBuildRecordingQuery:
    def test_title_only(self) -> None:
        assert build_recording_query("Song") == 'recording:"Song"'

    def test_title_and_artist(self) -> None:
        assert build_recording_query("Song", "The Band") == 'recording:"Song" AND artist:"The Band"'

    def test_quotes_are_escaped(self) -> None:
        assert build_recording_query('Say "Hi"') == 'recording:"Say \\"Hi\\""'


class TestMusicBrainzClientInit:
    def test_user_agent(self, musicbrainz_settings: MusicBrainzSettings) -> None:
        assert musicbrainz_settings.user_agent == "TestApp/1.0.0 ( test@example.com )"


class TestSearchRecording:
    async def test_sends_lucene_query(self, musicbrainz_client: MusicBrainzClient, fetcher: MagicMock) -> None:
        fetcher.fetch.return_value = _response({"recordings": [{"id": "rec-1", "title": "Song"}]})

        result = await musicbrainz_client.search_recording("Song", "Artist")

        assert result == [{"id": "rec-1", "title": "Song"}]
        fetcher.fetch.assert_awaited_once_with(
            "https://musicbrainz.org/ws/2/recording",
            params={"query": 'recording:"Song" AND artist:"Artist"', "limit": 1, "fmt": "json"},
        )

    async def test_blank_artist_is_dropped(self, musicbrainz_client: MusicBrainzClient, fetcher: MagicMock) -> None:
        fetcher.fetch.return_value = _response({"recordings": []})

        await musicbrainz_client.search_recording("Song", "   ")

        assert fetcher.fetch.await_args.kwargs["params"]["query"] == 'recording:"Song"'

    async def test_failed_request_returns_none(self, musicbrainz_client: MusicBrainzClient, fetcher: MagicMock) -> None:
        fetcher.fetch.return_value = None

        assert await musicbrainz_client.search_recording("Song") is None

    async def test_non_json_body_returns_none(self, musicbrainz_client: MusicBrainzClient, fetcher: MagicMock) -> None:
        response = MagicMock()
        response.json.side_effect = ValueError("not json")
        fetcher.fetch.return_value = response

        assert await musicbrainz_client.search_recording("Song") is None

    @pytest.mark.parametrize("payload", [{}, {"recordings": "nope"}, ["list"]])
    async def test_malformed_payload_returns_empty(
        self, musicbrainz_client: MusicBrainzClient, fetcher: MagicMock, payload: object
    ) -> None:
        fetcher.fetch.return_value = _response(payload)

        assert await musicbrainz_client.search_recording("Song") == []

    async def test_non_dict_recordings_are_skipped(
        self, musicbrainz_client: MusicBrainzClient, fetcher: MagicMock
    ) -> None:
        fetcher.fetch.return_value = _response({"recordings": ["junk", {"id": "ok"}]})

        assert await musicbrainz_client.search_recording("Song") == [{"id": "ok"}]
