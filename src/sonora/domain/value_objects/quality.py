"""Audio quality heuristics and display helpers.

Hey future me - reading real bitrate/sample-rate means parsing binary audio
headers, which we DON'T do at scan time. Instead estimate_quality() guesses from
the file size and duration (or a per-format table when the size is unknown) so
every track has a complete quality quadruple the moment it's scanned. The
enrichment pipeline swaps in real numbers later if the tag reader finds them.
"""

from sonora.domain.entities import QualityEstimate, QualityTier

LOSSLESS_FORMATS: frozenset[str] = frozenset({"FLAC", "WAV", "AIFF", "ALAC"})

# CD audio bitrate, used as the floor for lossless estimates.
CD_BITRATE_KBPS = 1411

DEFAULT_CHANNELS = 2

# (bitrate kbps, sample rate Hz, bit depth) when we have nothing but the format.
_FORMAT_DEFAULTS: dict[str, tuple[int, int, int]] = {
    "FLAC": (1411, 44100, 24),
    "WAV": (1411, 44100, 16),
    "AIFF": (1411, 44100, 16),
    "ALAC": (1411, 44100, 24),
    "AAC": (256, 44100, 16),
    "MP3": (320, 44100, 16),
    "OGG": (192, 44100, 16),
    "OPUS": (160, 48000, 16),
    "WMA": (192, 44100, 16),
}
_UNKNOWN_FORMAT_DEFAULT: tuple[int, int, int] = (192, 44100, 16)

# File extension -> display format. Unknown extensions are just uppercased.
_EXTENSION_FORMATS: dict[str, str] = {
    "mp3": "MP3",
    "flac": "FLAC",
    "wav": "WAV",
    "aac": "AAC",
    "m4a": "AAC",
    "ogg": "OGG",
    "wma": "WMA",
    "aiff": "AIFF",
    "alac": "ALAC",
    "opus": "OPUS",
}

_TIER_LABELS: dict[QualityTier, str] = {
    QualityTier.LOSSLESS: "LOSSLESS",
    QualityTier.HIGH: "HI-RES",
    QualityTier.STANDARD: "HIGH",
    QualityTier.LOW: "STANDARD",
}


def estimate_quality(
    audio_format: str,
    duration_seconds: float,
    file_size_bytes: int | None = None,
) -> QualityEstimate:
    """Estimate bitrate, sample rate, bit depth and channels.

    Never returns a partial result.

    Args:
        audio_format: Format tag such as "FLAC" or "mp3" (case-insensitive)
        duration_seconds: Track duration in seconds
        file_size_bytes: File size if known

    Returns:
        Complete QualityEstimate

    Examples:
        >>> estimate_quality("MP3", 200)
        QualityEstimate(bitrate=320, sample_rate=44100, bit_depth=16, channels=2)
    """
    fmt = (audio_format or "").upper()

    if file_size_bytes and duration_seconds and duration_seconds > 0:
        bitrate = round(file_size_bytes * 8 / (duration_seconds * 1000))

        if fmt in LOSSLESS_FORMATS:
            if bitrate > 2000:
                sample_rate, bit_depth = 96000, 24
            elif bitrate > 1500:
                sample_rate, bit_depth = 48000, 24
            elif bitrate > CD_BITRATE_KBPS:
                # Compressed lossless above raw CD rate can't be 16/44.1 material.
                sample_rate, bit_depth = 44100, 24
            else:
                sample_rate, bit_depth = 44100, 16
            return QualityEstimate(
                bitrate=max(bitrate, CD_BITRATE_KBPS),
                sample_rate=sample_rate,
                bit_depth=bit_depth,
                channels=DEFAULT_CHANNELS,
            )

        # Lossy: keep the computed bitrate as-is, even if it looks odd (VBR, tags, ...)
        return QualityEstimate(
            bitrate=bitrate,
            sample_rate=48000 if bitrate > 200 else 44100,
            bit_depth=16,
            channels=DEFAULT_CHANNELS,
        )

    bitrate, sample_rate, bit_depth = _FORMAT_DEFAULTS.get(fmt, _UNKNOWN_FORMAT_DEFAULT)
    return QualityEstimate(
        bitrate=bitrate,
        sample_rate=sample_rate,
        bit_depth=bit_depth,
        channels=DEFAULT_CHANNELS,
    )


def quality_tier(bitrate: int | None, audio_format: str | None) -> QualityTier:
    """Classify a track for the quality badge."""
    if (audio_format or "").upper() in LOSSLESS_FORMATS:
        return QualityTier.LOSSLESS
    if bitrate and bitrate >= 320:
        return QualityTier.HIGH
    if bitrate and bitrate >= 192:
        return QualityTier.STANDARD
    return QualityTier.LOW


def quality_label(tier: QualityTier) -> str:
    """Badge text for a tier."""
    return _TIER_LABELS[tier]


def format_from_filename(filename: str) -> str:
    """Derive the display format from a filename extension."""
    if "." not in filename:
        return ""
    ext = filename.rsplit(".", 1)[-1].lower()
    return _EXTENSION_FORMATS.get(ext, ext.upper())


def format_duration(seconds: float) -> str:
    """Format seconds as m:ss."""
    total = max(0, int(seconds))
    return f"{total // 60}:{total % 60:02d}"


def format_file_size(size_bytes: int | None) -> str:
    """Human readable file size (KB below 1 MiB, MB above)."""
    if not size_bytes:
        return "Unknown"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


__all__ = [
    "CD_BITRATE_KBPS",
    "LOSSLESS_FORMATS",
    "estimate_quality",
    "format_duration",
    "format_file_size",
    "format_from_filename",
    "quality_label",
    "quality_tier",
]
