"""Logging configuration for assetdump CLI."""

import logging
from enum import IntEnum

from rich.console import Console
from rich.logging import RichHandler


class LogLevel(IntEnum):
    """Log level enumeration."""

    QUIET = logging.WARNING
    NORMAL = logging.INFO
    VERBOSE = logging.DEBUG


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
) -> Console:
    """Configure logging based on CLI options.

    Log records go to stderr through a Rich handler; the returned console
    writes user-facing output to stdout.

    Args:
        verbosity: Number of -v flags (0=normal, 1=verbose, 2+=debug with paths)
        quiet: Suppress non-error output (takes precedence over verbosity)
        no_color: Disable colored output

    Returns:
        Configured Rich console for output
    """
    if quiet:
        level = LogLevel.QUIET
    elif verbosity >= 1:
        level = LogLevel.VERBOSE
    else:
        level = LogLevel.NORMAL

    force_terminal = False if no_color else None

    handler = RichHandler(
        console=Console(stderr=True, force_terminal=force_terminal, no_color=no_color),
        show_time=verbosity >= 2,
        show_path=verbosity >= 2,
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )

    return Console(force_terminal=force_terminal, no_color=no_color)
