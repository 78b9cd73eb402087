"""Asset registry: resolves asset names to formulae and artifacts."""

from .assets import AssetCollection, AssetReference, FileAsset, leaf_target_path
from .filters import FILTERS, apply_filters, resolve_filters
from .manager import AssetManager

__all__ = [
    "FILTERS",
    "AssetCollection",
    "AssetManager",
    "AssetReference",
    "FileAsset",
    "apply_filters",
    "leaf_target_path",
    "resolve_filters",
]
