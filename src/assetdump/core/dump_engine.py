"""Per-asset dump decisions.

For a named asset the engine writes:
- each debug leaf whose signature changed since the snapshot last saw it
- the main asset, unconditionally, when asked to

Whether a main asset is processed at all is decided by the caller through
``check_asset``.
"""

import logging

from ..models import Snapshot, leaf_key, main_key
from ..registry import AssetManager, AssetReference
from .change_detector import has_changed, leaf_signature, main_signature
from .writer import Writer

logger = logging.getLogger(__name__)


class DumpEngine:
    """Dumps named assets through a Writer."""

    def __init__(self, registry: AssetManager, writer: Writer) -> None:
        self.registry = registry
        self.writer = writer

    def is_debug(self, name: str) -> bool:
        """Effective debug mode: the formula's option wins over the global flag."""
        formula = self.registry.get_formula(name) if self.registry.has_formula(name) else None
        if formula is not None and formula.options.debug is not None:
            return formula.options.debug
        return self.registry.is_debug()

    def check_asset(self, name: str, snapshot: Snapshot) -> bool:
        """Check whether the main asset ``name`` changed, recording what was seen."""
        return has_changed(main_key(name), main_signature(self.registry, name), snapshot)

    def process_asset(
        self,
        name: str,
        snapshot: Snapshot | None = None,
        dump_main: bool = True,
    ) -> int:
        """Dump changed debug leaves of ``name`` and, optionally, its main asset.

        Args:
            name: Asset name
            snapshot: Snapshot shared across the pass (empty if omitted)
            dump_main: Write the main asset

        Returns:
            Number of files written
        """
        if snapshot is None:
            snapshot = Snapshot()
        asset = self.registry.get(name)
        writes = 0

        if self.is_debug(name):
            for leaf in asset:
                if isinstance(leaf, AssetReference):
                    leaf = self.registry.get(leaf.name)
                if has_changed(leaf_key(leaf.target_path), leaf_signature(leaf), snapshot):
                    self.writer.write(leaf)
                    writes += 1

        if dump_main:
            self.writer.write(asset)
            writes += 1

        logger.debug("Asset %s: %d file(s) written", name, writes)
        return writes

    def dump_all(self) -> int:
        """Dump every asset once, ignoring any previous state.

        Errors are not caught: the first failure ends the dump.

        Returns:
            Number of files written
        """
        return sum(self.process_asset(name) for name in self.registry.get_names())
