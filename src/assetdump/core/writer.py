"""Writes resolved artifacts under the output root."""

import logging
from collections.abc import Iterable
from pathlib import Path

from rich.markup import escape

from ..constants import DIR_MODE, UNKNOWN_PATH, UNKNOWN_ROOT
from ..errors import DumpWriteError
from ..output import OutputContext, get_output_context

logger = logging.getLogger(__name__)


def describe_source(artifact: object) -> str:
    """Format an artifact's source location for diagnostics."""
    root = getattr(artifact, "source_root", None)
    path = getattr(artifact, "source_path", None)
    return f"{root or UNKNOWN_ROOT}/{path or UNKNOWN_PATH}"


class Writer:
    """Dumps artifacts to ``write_to``, creating directories as needed."""

    def __init__(self, write_to: Path, ctx: OutputContext | None = None) -> None:
        self.write_to = write_to
        self.ctx = ctx or get_output_context()

    def target_for(self, artifact) -> Path:
        return self.write_to / artifact.target_path

    def write(self, artifact) -> Path:
        """Build ``artifact`` and write it, overwriting any existing file.

        Args:
            artifact: Resolved artifact with ``target_path`` and ``dump()``

        Returns:
            Path of the written file

        Raises:
            DumpWriteError: If the directory or file cannot be written
        """
        target = self.target_for(artifact)
        directory = target.parent
        if not directory.is_dir():
            self.ctx.print(f"[green]\\[dir+][/green]  {escape(str(directory))}")
            try:
                directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            except OSError as e:
                raise DumpWriteError(f"Unable to create directory {directory}") from e

        self.ctx.print(f"[green]\\[file+][/green] {escape(str(target))}")
        if self.ctx.verbose:
            leaves = list(artifact) if isinstance(artifact, Iterable) else [artifact]
            for leaf in leaves:
                self.ctx.print(f"        [yellow]{escape(describe_source(leaf))}[/yellow]")

        content = artifact.dump()
        try:
            target.write_bytes(content)
        except OSError as e:
            raise DumpWriteError(f"Unable to write file {target}") from e
        logger.debug("Wrote %d bytes to %s", len(content), target)
        return target
