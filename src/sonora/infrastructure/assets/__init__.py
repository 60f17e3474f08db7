"""Audio asset enumeration."""

from sonora.infrastructure.assets.directory_asset_provider import DirectoryAssetProvider

__all__ = ["DirectoryAssetProvider"]
