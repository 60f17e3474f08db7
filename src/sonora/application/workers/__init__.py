"""Background workers."""

from sonora.application.workers.enrichment_worker import (
    EnrichmentPipeline,
    EnrichmentStats,
)

__all__ = ["EnrichmentPipeline", "EnrichmentStats"]
