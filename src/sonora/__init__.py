"""Sonora - music library metadata enrichment and playback queue core."""

__version__ = "0.1.0"
