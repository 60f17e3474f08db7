"""Application caches."""

from sonora.application.cache.metadata_cache import MetadataStore, cache_storage_key

__all__ = ["MetadataStore", "cache_storage_key"]
