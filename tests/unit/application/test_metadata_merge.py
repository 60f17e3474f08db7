"""Tests for the pure metadata merge."""

from sonora.application.services.metadata_merge import merge_metadata, with_heuristic_defaults
from sonora.domain.entities import CacheEntry


class TestMergeMetadata:
    def test_learned_fields_win(self, track_factory) -> None:
        track = track_factory("1", "song.mp3")
        learned = CacheEntry(
            title="Real Title",
            artist="Real Artist",
            album="Real Album",
            cover_art="file:///art.jpg",
            year="1999",
            bitrate=256,
            sample_rate=48000,
            bit_depth=16,
            channels=2,
        )

        merged = merge_metadata(track, learned)

        assert merged.title == "Real Title"
        assert merged.artist == "Real Artist"
        assert merged.album == "Real Album"
        assert merged.artwork == "file:///art.jpg"
        assert merged.year == "1999"
        assert (merged.bitrate, merged.sample_rate) == (256, 48000)

    def test_never_downgrades_to_none_or_blank(self, track_factory) -> None:
        track = track_factory(
            "1", artist="Known", album="Known Album", artwork="file:///old.jpg", title="Kept"
        )

        merged = merge_metadata(track, CacheEntry(artist="  ", album=None, cover_art=None))

        assert merged.artist == "Known"
        assert merged.album == "Known Album"
        assert merged.artwork == "file:///old.jpg"
        assert merged.title == "Kept"

    def test_none_or_negative_applies_heuristics_only(self, track_factory) -> None:
        track = track_factory("1", "05_Random_Song_xR2y5uG1oPQ.mp3")

        for learned in (None, CacheEntry.negative()):
            merged = merge_metadata(track, learned)
            assert merged.title == "Random Song"
            assert merged.artist == "Unknown Artist"
            assert (merged.bitrate, merged.sample_rate, merged.bit_depth, merged.channels) == (
                320,
                44100,
                16,
                2,
            )

    def test_incomplete_learned_quality_is_ignored(self, track_factory) -> None:
        track = track_factory("1")

        merged = merge_metadata(track, CacheEntry(bitrate=999))

        assert merged.bitrate == 320  # estimator default for MP3

    def test_immutable_fields_untouched(self, track_factory) -> None:
        track = track_factory("1", "a.flac", format="FLAC", duration=300.0, file_size=55_000_000)

        merged = merge_metadata(track, CacheEntry(title="X"))

        assert (merged.id, merged.uri, merged.filename, merged.format, merged.duration) == (
            track.id,
            track.uri,
            track.filename,
            track.format,
            track.duration,
        )
        assert merged.metadata_fetched is False
        assert track.title != "X"  # input untouched


class TestHeuristicDefaults:
    def test_keeps_existing_quality(self, track_factory) -> None:
        track = track_factory("1", bitrate=128, sample_rate=22050, bit_depth=8, channels=1)

        assert with_heuristic_defaults(track).bitrate == 128

    def test_keeps_non_filename_title(self, track_factory) -> None:
        track = track_factory("1", "01_x.mp3", title="From Tags")

        assert with_heuristic_defaults(track).title == "From Tags"
