"""Persistence of the watch snapshot across restarts.

The snapshot lives in the system temp directory under a name derived from
the output root, so watching two output roots never shares state.
Corrupted or missing files mean "no prior knowledge", never a fatal error.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ..constants import SNAPSHOT_HASH_LENGTH, SNAPSHOT_PREFIX
from ..errors import ConfigurationError, DumpWriteError
from ..models import Snapshot

logger = logging.getLogger(__name__)


def snapshot_path(write_to: Path, cache_dir: Path | None = None) -> Path:
    """Get the snapshot file path for an output root.

    Args:
        write_to: Configured output root
        cache_dir: Directory holding snapshots, defaults to the temp dir

    Returns:
        Path to the snapshot file
    """
    digest = hashlib.sha1(str(write_to).encode()).hexdigest()[:SNAPSHOT_HASH_LENGTH]
    directory = cache_dir if cache_dir is not None else Path(tempfile.gettempdir())
    return directory / f"{SNAPSHOT_PREFIX}{digest}.json"


class SnapshotStore:
    """Loads and saves a Snapshot at a fixed path."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def for_output_root(cls, write_to: Path, cache_dir: Path | None = None) -> "SnapshotStore":
        return cls(snapshot_path(write_to, cache_dir))

    def prepare(self) -> None:
        """Ensure the snapshot directory exists.

        Raises:
            ConfigurationError: If the directory cannot be created
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Unable to create cache directory {self.path.parent}") from e

    def load(self, force: bool = False) -> Snapshot:
        """Load the persisted snapshot.

        Args:
            force: Ignore any persisted state and start empty

        Returns:
            Persisted snapshot, or an empty one if forced, absent or corrupted
        """
        if force or not self.path.exists():
            return Snapshot()
        try:
            return Snapshot.model_validate_json(self.path.read_text())
        except (ValidationError, OSError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable snapshot %s: %s", self.path, e)
            return Snapshot()

    def save(self, snapshot: Snapshot) -> None:
        """Persist ``snapshot``, replacing the previous file atomically.

        Raises:
            DumpWriteError: If the file cannot be written
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(snapshot.model_dump_json())
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise DumpWriteError(f"Unable to write snapshot {self.path}") from e
