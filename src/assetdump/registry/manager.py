"""File-backed asset manager.

Asset formulae are read from a TOML manifest::

    [assets.app_js]
    inputs = ["js/*.js", "@vendor_js"]
    filters = ["strip"]
    output = "js/*.js"

    [assets.app_js.options]
    debug = true

Input paths are relative to the manifest's directory. Resolved artifacts are
cached per name until ``force_reload()`` is called.
"""

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from ..errors import ResolutionError
from ..models import Formula
from .assets import AssetCollection, AssetReference, FileAsset, Leaf, leaf_target_path
from .filters import resolve_filters

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "@"
GLOB_CHARS = frozenset("*?[")


class AssetManager:
    """Resolves asset names to formulae and artifacts."""

    def __init__(self, manifest_path: Path, debug: bool = True) -> None:
        self.manifest_path = manifest_path
        self.debug = debug
        self._formulae: dict[str, Formula] = {}
        self._assets: dict[str, AssetCollection] = {}
        self.load()

    @property
    def source_root(self) -> Path:
        """Directory input paths are resolved against."""
        return self.manifest_path.parent

    def load(self) -> None:
        """Read formulae from the manifest.

        Raises:
            ResolutionError: If the manifest is missing or malformed
        """
        if not self.manifest_path.exists():
            raise ResolutionError(f"Asset manifest not found: {self.manifest_path}")
        try:
            with open(self.manifest_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ResolutionError(f"Malformed asset manifest {self.manifest_path}: {e}") from e

        formulae: dict[str, Formula] = {}
        for name, raw in data.get("assets", {}).items():
            try:
                formulae[name] = Formula.model_validate(raw)
            except ValidationError as e:
                raise ResolutionError(f"Malformed formula for asset '{name}': {e}") from e
        self._formulae = formulae
        logger.debug("Loaded %d formulae from %s", len(formulae), self.manifest_path)

    def force_reload(self) -> None:
        """Forget resolved artifacts and re-read the manifest."""
        self._assets.clear()
        self.load()

    def get_names(self) -> list[str]:
        return list(self._formulae)

    def has_formula(self, name: str) -> bool:
        return name in self._formulae

    def get_formula(self, name: str) -> Formula | None:
        return self._formulae.get(name)

    def is_debug(self) -> bool:
        return self.debug

    def cached_names(self) -> list[str]:
        """Names of the artifacts resolved since the last reload."""
        return list(self._assets)

    def get(self, name: str) -> AssetCollection:
        """Resolve ``name`` to its artifact.

        Raises:
            ResolutionError: If there is no asset called ``name`` or its
                formula cannot be built
        """
        if name not in self._assets:
            formula = self._formulae.get(name)
            if formula is None:
                raise ResolutionError(f"There is no '{name}' asset")
            self._assets[name] = self._build(name, formula)
        return self._assets[name]

    def _build(self, name: str, formula: Formula) -> AssetCollection:
        filters = resolve_filters(formula.filters)
        target = formula.target_path(name)
        leaves: list[Leaf] = []
        for entry in formula.inputs:
            if entry.startswith(REFERENCE_PREFIX):
                ref = entry[len(REFERENCE_PREFIX) :]
                if ref not in self._formulae:
                    raise ResolutionError(f"Asset '{name}' references unknown asset '{ref}'")
                leaves.append(AssetReference(self, ref))
                continue
            for source_path in self._expand(name, entry):
                position = len(leaves) + 1
                leaves.append(
                    FileAsset(
                        self.source_root,
                        source_path,
                        leaf_target_path(target, position, source_path),
                        filters,
                    )
                )
        return AssetCollection(name, target, leaves)

    def _expand(self, name: str, entry: str) -> list[str]:
        """Expand one input entry to source paths relative to the root."""
        if GLOB_CHARS.intersection(entry):
            matches = sorted(p for p in self.source_root.glob(entry) if p.is_file())
            return [p.relative_to(self.source_root).as_posix() for p in matches]
        if not (self.source_root / entry).is_file():
            raise ResolutionError(f"Input '{entry}' of asset '{name}' not found")
        return [entry]
