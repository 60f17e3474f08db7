"""Configuration module for Sonora."""

from .settings import (
    DatabaseSettings,
    EnrichmentSettings,
    LibrarySettings,
    LoggingSettings,
    MusicBrainzSettings,
    Settings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "EnrichmentSettings",
    "LibrarySettings",
    "LoggingSettings",
    "MusicBrainzSettings",
    "Settings",
    "get_settings",
]
