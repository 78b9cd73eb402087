"""Resolved artifacts produced by the asset manager.

Three kinds of artifact exist:
- FileAsset: a single source file, the atomic leaf of a collection
- AssetReference: a leaf pointing at another named asset
- AssetCollection: the main artifact of a named asset, iterable over its leaves
"""

from collections.abc import Iterator
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from ..errors import ResolutionError
from .filters import Filter, apply_filters

if TYPE_CHECKING:
    from .manager import AssetManager


def leaf_target_path(main_target: str, position: int, source_path: str) -> str:
    """Derive the debug target path of a leaf from its collection's target.

    ``js/app.js`` with leaf #2 ``src/b.js`` becomes ``js/app_part_2_b.js``.
    """
    target = PurePosixPath(main_target)
    leaf_stem = PurePosixPath(source_path).stem
    name = f"{target.stem}_part_{position}_{leaf_stem}{target.suffix}"
    return str(target.with_name(name))


class FileAsset:
    """A single source file."""

    def __init__(
        self,
        source_root: Path,
        source_path: str,
        target_path: str,
        filters: list[Filter] | None = None,
    ) -> None:
        self.source_root = source_root
        self.source_path = source_path
        self.target_path = target_path
        self.filters = filters or []

    @property
    def path(self) -> Path:
        return self.source_root / self.source_path

    def last_modified(self) -> float | None:
        try:
            return self.path.stat().st_mtime
        except FileNotFoundError:
            raise ResolutionError(f"Input file not found: {self.path}") from None

    def dump(self) -> bytes:
        try:
            content = self.path.read_bytes()
        except FileNotFoundError:
            raise ResolutionError(f"Input file not found: {self.path}") from None
        return apply_filters(content, self.filters)

    def __repr__(self) -> str:
        return f"FileAsset({self.source_path!r} -> {self.target_path!r})"


class AssetReference:
    """A leaf that stands for another named asset.

    The reference is resolved through the manager on every access so that
    it always points at the manager's current definition.
    """

    source_root: Path | None = None
    source_path: str | None = None

    def __init__(self, manager: "AssetManager", name: str) -> None:
        self.manager = manager
        self.name = name

    def resolve(self) -> "AssetCollection":
        """Resolve to the referenced asset."""
        return self.manager.get(self.name)

    @property
    def target_path(self) -> str:
        return self.resolve().target_path

    def last_modified(self) -> float | None:
        return self.resolve().last_modified()

    def dump(self) -> bytes:
        return self.resolve().dump()

    def __repr__(self) -> str:
        return f"AssetReference({self.name!r})"


Leaf = FileAsset | AssetReference


class AssetCollection:
    """The main artifact of a named asset.

    Its modification time is the newest of its leaves' and its content is
    the leaves' content joined by newlines.
    """

    source_root: Path | None = None
    source_path: str | None = None

    def __init__(self, name: str, target_path: str, leaves: list[Leaf]) -> None:
        self.name = name
        self.target_path = target_path
        self.leaves = leaves

    def __iter__(self) -> Iterator[Leaf]:
        return iter(self.leaves)

    def __len__(self) -> int:
        return len(self.leaves)

    def last_modified(self) -> float | None:
        mtimes = [m for m in (leaf.last_modified() for leaf in self.leaves) if m is not None]
        return max(mtimes) if mtimes else None

    def dump(self) -> bytes:
        return b"\n".join(leaf.dump() for leaf in self.leaves)

    def __repr__(self) -> str:
        return f"AssetCollection({self.name!r}, {len(self.leaves)} leaves)"
