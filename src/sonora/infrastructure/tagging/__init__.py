"""Local audio tag reading."""

from sonora.infrastructure.tagging.mutagen_tag_reader import MutagenTagReader

__all__ = ["MutagenTagReader"]
