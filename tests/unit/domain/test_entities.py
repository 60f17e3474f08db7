"""Tests for domain entities."""

import dataclasses

import pytest

from sonora.domain.entities import (
    NOT_FOUND_KEY,
    CacheEntry,
    LocalTags,
    QualityEstimate,
    Track,
)


class TestTrack:
    def test_is_frozen(self, track_factory) -> None:
        track = track_factory("1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            track.title = "changed"  # type: ignore[misc]

    def test_with_quality_sets_all_four_fields(self, track_factory) -> None:
        track = track_factory("1")
        assert not track.has_quality

        upgraded = track.with_quality(QualityEstimate(320, 44100, 16, 2))

        assert upgraded.has_quality
        assert (upgraded.bitrate, upgraded.sample_rate, upgraded.bit_depth, upgraded.channels) == (
            320,
            44100,
            16,
            2,
        )
        assert track.bitrate is None

    def test_defaults(self) -> None:
        track = Track(id="1", uri="", title="T", filename="t.mp3", duration=1.0, format="MP3")
        assert track.artist == "Unknown Artist"
        assert track.album == "Unknown Album"
        assert track.metadata_fetched is False


class TestCacheEntry:
    def test_negative_entry_serializes_as_sentinel(self) -> None:
        assert CacheEntry.negative().to_dict() == {NOT_FOUND_KEY: True}

    def test_to_dict_omits_none(self) -> None:
        entry = CacheEntry(title="Song", artist="Artist")
        assert entry.to_dict() == {"title": "Song", "artist": "Artist"}

    def test_from_dict_round_trips_and_ignores_junk(self) -> None:
        entry = CacheEntry.from_dict(
            {
                "title": "Song",
                "bitrate": 320,
                "sample_rate": "44100",  # wrong type, dropped
                "channels": True,  # bool is not an int here
                "unknown": "x",
            }
        )
        assert entry == CacheEntry(title="Song", bitrate=320)

    def test_quality_only_when_complete(self) -> None:
        assert CacheEntry(bitrate=320).quality is None
        full = CacheEntry(bitrate=320, sample_rate=44100, bit_depth=16, channels=2)
        assert full.quality == QualityEstimate(320, 44100, 16, 2)


class TestLocalTags:
    def test_is_empty(self) -> None:
        assert LocalTags().is_empty
        assert LocalTags(bitrate=320, sample_rate=44100).is_empty
        assert not LocalTags(title="Song").is_empty
        assert not LocalTags(embedded_art=b"\xff\xd8").is_empty

    def test_quality_fills_missing_depth_and_channels(self) -> None:
        tags = LocalTags(bitrate=256, sample_rate=48000)
        assert tags.quality == QualityEstimate(256, 48000, 16, 2)

    def test_quality_none_without_stream_info(self) -> None:
        assert LocalTags(title="x").quality is None
