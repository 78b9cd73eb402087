"""Core dump logic for assetdump.

This package contains the incremental dump engine:
- change_detector: Signature comparison against a snapshot
- snapshot_store: Snapshot persistence across restarts
- writer: Artifact output under the output root
- dump_engine: Per-asset leaf/main dump decisions
- debouncer: Repeated error suppression
- scheduler: Watch mode pass loop with poll and event triggers
"""

from .change_detector import has_changed, leaf_signature, main_signature
from .debouncer import ErrorDebouncer
from .dump_engine import DumpEngine
from .scheduler import PassTrigger, WatchScheduler
from .snapshot_store import SnapshotStore, snapshot_path
from .writer import Writer, describe_source

__all__ = [
    "DumpEngine",
    "ErrorDebouncer",
    "PassTrigger",
    "SnapshotStore",
    "WatchScheduler",
    "Writer",
    "describe_source",
    "has_changed",
    "leaf_signature",
    "main_signature",
    "snapshot_path",
]
