"""Application layer: cache, services, background workers."""
