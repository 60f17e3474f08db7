"""Application lifecycle management for startup and shutdown.

Hey future me - this is the ONE place where the object graph is wired:
settings -> logging -> database -> key-value storage -> metadata cache,
one RateLimiter -> one RateLimitedFetcher -> MusicBrainz + CAA clients ->
resolver, then tag reader, artwork store, enrichment pipeline and library.
Everything routes need is stored on app.state (see api/dependencies.py).

There is exactly ONE RateLimiter per process. Don't create another anywhere
else or the 1 req/sec MusicBrainz limit is silently doubled.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sonora.application.cache.metadata_cache import MetadataStore
from sonora.application.services.library_service import LibraryService
from sonora.application.services.remote_metadata_resolver import RemoteMetadataResolver
from sonora.application.workers.enrichment_worker import EnrichmentPipeline
from sonora.config import Settings, get_settings
from sonora.infrastructure.artwork import ArtworkStore
from sonora.infrastructure.assets import DirectoryAssetProvider
from sonora.infrastructure.integrations import (
    CoverArtArchiveClient,
    MusicBrainzClient,
    RateLimitedFetcher,
)
from sonora.infrastructure.observability import configure_logging
from sonora.infrastructure.persistence import Database, SqlKeyValueStorage
from sonora.infrastructure.rate_limiter import RateLimiter
from sonora.infrastructure.tagging import MutagenTagReader

logger = logging.getLogger(__name__)


# Listen future me, everything before `yield` runs at STARTUP, everything after at
# SHUTDOWN. The try/finally makes sure a running enrichment is cancelled and HTTP
# clients and the DB engine get closed, even when startup blows up halfway.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()

    configure_logging(
        log_level=settings.logging.level,
        json_format=settings.logging.json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    db: Database | None = None
    fetcher: RateLimitedFetcher | None = None
    artwork_store: ArtworkStore | None = None
    pipeline: EnrichmentPipeline | None = None
    try:
        db = Database(settings.database)
        await db.create_tables()
        app.state.db = db
        logger.info("Database initialized: %s", settings.database.url)

        cache = MetadataStore(SqlKeyValueStorage(db), settings.enrichment.cache_version)

        mb_settings = settings.musicbrainz
        limiter = RateLimiter.for_musicbrainz(mb_settings.min_request_interval)
        fetcher = RateLimitedFetcher(
            limiter, user_agent=mb_settings.user_agent, timeout=mb_settings.timeout
        )
        resolver = RemoteMetadataResolver(
            MusicBrainzClient(mb_settings, fetcher),
            CoverArtArchiveClient(mb_settings, fetcher),
        )
        app.state.rate_limiter = limiter
        app.state.resolver = resolver

        artwork_store = ArtworkStore(
            settings.enrichment.artwork_dir, settings.enrichment.cache_version
        )
        pipeline = EnrichmentPipeline(
            cache=cache,
            tag_reader=MutagenTagReader(),
            artwork_store=artwork_store,
            resolver=resolver,
            settings=settings.enrichment,
        )

        music_dir = settings.library.music_dir
        provider = DirectoryAssetProvider(music_dir) if music_dir else None
        library = LibraryService(
            cache=cache,
            pipeline=pipeline,
            provider=provider,
            scan_limit=settings.library.scan_limit,
        )
        app.state.library = library
        await library.initialize()
        logger.info(
            "Library ready: %d tracks (%s)",
            len(library.tracks),
            "demo" if library.is_demo else music_dir,
        )

        yield
    finally:
        logger.info("Shutting down application")
        # The background run must be gone before its HTTP clients and DB are closed.
        if pipeline is not None:
            await pipeline.stop()
        if fetcher is not None:
            await fetcher.close()
        if artwork_store is not None:
            await artwork_store.close()
        if db is not None:
            await db.close()
