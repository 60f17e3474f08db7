"""Artwork materialization."""

from sonora.infrastructure.artwork.artwork_store import ArtworkStore

__all__ = ["ArtworkStore"]
