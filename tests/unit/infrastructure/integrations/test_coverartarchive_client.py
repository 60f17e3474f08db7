"""Tests for the Cover Art Archive client (through the real fetcher)."""

import pytest
from pytest_httpx import HTTPXMock

from sonora.config.settings import MusicBrainzSettings
from sonora.infrastructure.integrations import CoverArtArchiveClient, RateLimitedFetcher
from sonora.infrastructure.integrations.coverartarchive_client import CoverArt, parse_images
from sonora.infrastructure.rate_limiter import RateLimiter

RELEASE_URL = "https://coverartarchive.org/release/rel-1"


@pytest.fixture
async def cover_art_client(musicbrainz_settings: MusicBrainzSettings, fake_clock):
    limiter = RateLimiter(min_interval=1.1, clock=fake_clock, sleep=fake_clock.sleep)
    fetcher = RateLimitedFetcher(limiter, user_agent=musicbrainz_settings.user_agent)
    yield CoverArtArchiveClient(musicbrainz_settings, fetcher)
    await fetcher.close()


class TestParseImages:
    def test_best_url_preference(self) -> None:
        assert CoverArt("1", "orig", thumbnail_250="250", thumbnail_500="500").best_url == "500"
        assert CoverArt("1", "orig", thumbnail_250="250", thumbnail_large="large").best_url == "large"
        assert CoverArt("1", "orig", thumbnail_250="250").best_url == "250"
        assert CoverArt("1", "orig").best_url == "orig"

    def test_skips_malformed_entries(self) -> None:
        images = parse_images({"images": ["junk", {"id": 7, "image": "x", "thumbnails": "bad"}]})

        assert len(images) == 1
        assert images[0].image_id == "7"
        assert images[0].thumbnail_500 is None

    def test_non_dict_payload(self) -> None:
        assert parse_images(None) == []


class TestGetFrontCoverUrl:
    async def test_returns_front_image(self, cover_art_client: CoverArtArchiveClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url=RELEASE_URL,
            json={
                "images": [
                    {"id": 1, "front": False, "image": "back.jpg", "thumbnails": {"500": "back-500.jpg"}},
                    {"id": 2, "front": True, "image": "front.jpg", "thumbnails": {"500": "front-500.jpg"}},
                ]
            },
        )

        assert await cover_art_client.get_front_cover_url("rel-1") == "front-500.jpg"

    async def test_404_returns_none(self, cover_art_client: CoverArtArchiveClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=RELEASE_URL, status_code=404)

        assert await cover_art_client.get_front_cover_url("rel-1") is None

    async def test_no_front_image_returns_none(
        self, cover_art_client: CoverArtArchiveClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=RELEASE_URL, json={"images": [{"id": 1, "front": False, "image": "b.jpg"}]})

        assert await cover_art_client.get_front_cover_url("rel-1") is None

    async def test_fallback_url(self, cover_art_client: CoverArtArchiveClient) -> None:
        assert cover_art_client.fallback_front_url("rel-1") == f"{RELEASE_URL}/front-250"
