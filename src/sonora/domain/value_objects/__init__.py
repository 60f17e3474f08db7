"""Pure domain helpers (no I/O)."""

from sonora.domain.value_objects.quality import (
    estimate_quality,
    format_duration,
    format_file_size,
    format_from_filename,
    quality_label,
    quality_tier,
)
from sonora.domain.value_objects.title_normalization import (
    normalize_title,
    strip_extension,
    title_from_filename,
)

__all__ = [
    "estimate_quality",
    "format_duration",
    "format_file_size",
    "format_from_filename",
    "normalize_title",
    "quality_label",
    "quality_tier",
    "strip_extension",
    "title_from_filename",
]
