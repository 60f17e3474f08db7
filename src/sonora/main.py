"""FastAPI application factory and entry point."""

import uvicorn
from fastapi import FastAPI

from sonora import __version__
from sonora.api.exception_handlers import register_exception_handlers
from sonora.api.routers import api_router
from sonora.config import Settings, get_settings
from sonora.infrastructure.lifecycle import lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Explicit settings (tests); defaults to get_settings() at startup
    """
    app = FastAPI(
        title="Sonora",
        description="Music library metadata enrichment and playback queue service",
        version=__version__,
        lifespan=lifespan,
    )
    if settings is not None:
        app.state.settings = settings

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")
    return app


def main() -> None:
    """Run the API server with uvicorn."""
    uvicorn.run(
        "sonora.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8765,
        log_level=get_settings().logging.level.lower(),
    )


if __name__ == "__main__":
    main()
