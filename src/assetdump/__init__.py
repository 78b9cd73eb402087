"""assetdump: incremental asset dumper with a watch mode."""

__version__ = "0.1.0"
