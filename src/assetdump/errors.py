"""Errors raised by assetdump."""


class AssetDumpError(Exception):
    """Base exception for assetdump errors."""


class ConfigurationError(AssetDumpError):
    """Raised when the tool is misconfigured and cannot start."""


class ResolutionError(AssetDumpError):
    """Raised when an asset name or formula cannot be resolved."""


class DumpWriteError(AssetDumpError, OSError):
    """Raised when a directory, file or snapshot cannot be written."""
