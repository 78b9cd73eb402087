"""CLI command implementations for assetdump.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .dump import dump
from .init import init

__all__ = [
    "dump",
    "init",
]
