"""Pydantic data models for assetdump.

This package defines the data structures shared by the dump engine:
- Asset recipes (Formula, FormulaOptions)
- Change-detection state (ModificationSignature, Snapshot)
- Tagged artifact keys (main_key, leaf_key)

All models are Pydantic BaseModel subclasses so the snapshot can be
persisted as JSON and the formula serialized into a comparable fingerprint.
"""

from .formula import Formula, FormulaOptions
from .snapshot import (
    LEAF_PREFIX,
    MAIN_PREFIX,
    ModificationSignature,
    Snapshot,
    leaf_key,
    main_key,
)

__all__ = [
    "LEAF_PREFIX",
    "MAIN_PREFIX",
    "Formula",
    "FormulaOptions",
    "ModificationSignature",
    "Snapshot",
    "leaf_key",
    "main_key",
]
