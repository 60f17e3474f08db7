"""Application settings loaded from environment variables.

Hey future me - every knob lives here and NOWHERE else. Services take the
sub-settings they need in their constructor (MusicBrainzClient gets
MusicBrainzSettings, the pipeline gets EnrichmentSettings) so tests can build
them directly without touching the environment.

Env vars use the SONORA_ prefix and "__" for nesting, e.g.
SONORA_ENRICHMENT__BATCH_SIZE=5 or SONORA_LOGGING__JSON_FORMAT=true.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MusicBrainzSettings(BaseModel):
    """MusicBrainz + Cover Art Archive access settings."""

    app_name: str = "Sonora"
    app_version: str = "1.0"
    contact: str = "music-player-app"
    api_base_url: str = "https://musicbrainz.org/ws/2"
    cover_art_base_url: str = "https://coverartarchive.org"
    # MusicBrainz allows ~1 req/sec per client. 1.1s keeps us safely under it,
    # and this limit is shared by EVERY request going to MB or CAA.
    min_request_interval: float = Field(default=1.1, gt=0)
    timeout: float = 30.0

    @property
    def user_agent(self) -> str:
        """User-Agent in the "AppName/Version ( contact )" form MB requires."""
        return f"{self.app_name}/{self.app_version} ( {self.contact} )"


class EnrichmentSettings(BaseModel):
    """Background metadata enrichment settings."""

    batch_size: int = Field(default=3, ge=1)
    batch_delay: float = Field(default=0.2, ge=0)
    # Bump to invalidate every cached lookup (storage key and artwork names change).
    cache_version: int = Field(default=3, ge=1)
    artwork_dir: Path = Path("data/artwork")


class LibrarySettings(BaseModel):
    """Device library settings."""

    # None = no library on this host, serve the demo library instead.
    music_dir: Path | None = None
    scan_limit: int = Field(default=500, ge=1)


class DatabaseSettings(BaseModel):
    """Key-value storage database settings."""

    url: str = "sqlite+aiosqlite:///data/sonora.db"
    echo: bool = False


class LoggingSettings(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    json_format: bool = False


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(
        env_prefix="SONORA_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "sonora"
    musicbrainz: MusicBrainzSettings = Field(default_factory=MusicBrainzSettings)
    enrichment: EnrichmentSettings = Field(default_factory=EnrichmentSettings)
    library: LibrarySettings = Field(default_factory=LibrarySettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings()
