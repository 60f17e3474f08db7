"""Tests for quality estimation and display helpers."""

import pytest

from sonora.domain.entities import QualityEstimate, QualityTier
from sonora.domain.value_objects.quality import (
    estimate_quality,
    format_duration,
    format_file_size,
    format_from_filename,
    quality_label,
    quality_tier,
)


class TestEstimateQualityFromSize:
    """Size + duration known: bitrate is computed."""

    def test_flac_above_cd_rate_is_24_bit(self) -> None:
        # 55 MB over 5 minutes = ~1467 kbps
        quality = estimate_quality("FLAC", 300, 55_000_000)

        assert quality == QualityEstimate(
            bitrate=1467, sample_rate=44100, bit_depth=24, channels=2
        )

    def test_hi_res_flac(self) -> None:
        quality = estimate_quality("FLAC", 60, 16_500_000)  # 2200 kbps

        assert (quality.sample_rate, quality.bit_depth) == (96000, 24)

    def test_48k_lossless_tier(self) -> None:
        quality = estimate_quality("WAV", 60, 12_000_000)  # 1600 kbps

        assert (quality.sample_rate, quality.bit_depth) == (48000, 24)

    def test_lossless_bitrate_is_floored_at_cd_rate(self) -> None:
        quality = estimate_quality("FLAC", 60, 6_750_000)  # 900 kbps

        assert quality.bitrate == 1411
        assert (quality.sample_rate, quality.bit_depth) == (44100, 16)

    def test_lossy_high_bitrate_uses_48k(self) -> None:
        quality = estimate_quality("MP3", 200, 8_000_000)  # 320 kbps

        assert quality == QualityEstimate(
            bitrate=320, sample_rate=48000, bit_depth=16, channels=2
        )

    def test_lossy_low_bitrate_keeps_computed_value(self) -> None:
        quality = estimate_quality("MP3", 200, 3_200_000)  # 128 kbps

        assert quality.bitrate == 128
        assert quality.sample_rate == 44100


class TestEstimateQualityFromFormat:
    """No size: per-format table."""

    def test_mp3_defaults(self) -> None:
        assert estimate_quality("MP3", 200) == QualityEstimate(
            bitrate=320, sample_rate=44100, bit_depth=16, channels=2
        )

    @pytest.mark.parametrize(
        ("fmt", "expected"),
        [
            ("FLAC", (1411, 44100, 24)),
            ("flac", (1411, 44100, 24)),
            ("WAV", (1411, 44100, 16)),
            ("AAC", (256, 44100, 16)),
            ("OPUS", (160, 48000, 16)),
            ("XYZ", (192, 44100, 16)),
            ("", (192, 44100, 16)),
        ],
    )
    def test_table(self, fmt: str, expected: tuple[int, int, int]) -> None:
        quality = estimate_quality(fmt, 180)

        assert (quality.bitrate, quality.sample_rate, quality.bit_depth) == expected
        assert quality.channels == 2

    def test_zero_duration_falls_back_to_table(self) -> None:
        assert estimate_quality("MP3", 0, 5_000_000).bitrate == 320


class TestQualityHelpers:
    @pytest.mark.parametrize(
        ("bitrate", "fmt", "tier"),
        [
            (1411, "FLAC", QualityTier.LOSSLESS),
            (None, "wav", QualityTier.LOSSLESS),
            (320, "MP3", QualityTier.HIGH),
            (256, "AAC", QualityTier.STANDARD),
            (128, "MP3", QualityTier.LOW),
            (None, None, QualityTier.LOW),
        ],
    )
    def test_quality_tier(self, bitrate: int | None, fmt: str | None, tier: QualityTier) -> None:
        assert quality_tier(bitrate, fmt) == tier

    def test_quality_label(self) -> None:
        assert quality_label(QualityTier.LOSSLESS) == "LOSSLESS"
        assert quality_label(QualityTier.HIGH) == "HI-RES"

    @pytest.mark.parametrize(
        ("filename", "fmt"),
        [
            ("song.mp3", "MP3"),
            ("song.m4a", "AAC"),
            ("SONG.FLAC", "FLAC"),
            ("song.xyz", "XYZ"),
            ("noext", ""),
        ],
    )
    def test_format_from_filename(self, filename: str, fmt: str) -> None:
        assert format_from_filename(filename) == fmt

    def test_format_duration(self) -> None:
        assert format_duration(234) == "3:54"
        assert format_duration(59.9) == "0:59"
        assert format_duration(-5) == "0:00"

    def test_format_file_size(self) -> None:
        assert format_file_size(None) == "Unknown"
        assert format_file_size(2048) == "2 KB"
        assert format_file_size(55_000_000) == "52.5 MB"
