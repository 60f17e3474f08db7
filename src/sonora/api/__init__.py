"""API module for Sonora.

The entry point is `api_router` from routers/, mounted under /api in main.py.

Layout:
- routers/: endpoints (health, metadata, library)
- schemas/: pydantic request/response models
- dependencies.py: services pulled from app.state
- exception_handlers.py: domain exception -> HTTP response mapping
"""
