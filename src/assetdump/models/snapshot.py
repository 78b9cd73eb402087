"""Snapshot models for change detection.

A snapshot maps artifact keys to the last observed modification signature.
Main assets and debug leaves live side by side in the same mapping, so keys
are tagged with their kind: ``main:<asset name>`` or ``leaf:<target path>``.
"""

from pydantic import BaseModel, Field

MAIN_PREFIX = "main:"
LEAF_PREFIX = "leaf:"


def main_key(name: str) -> str:
    """Snapshot key for a main asset."""
    return f"{MAIN_PREFIX}{name}"


def leaf_key(target_path: str) -> str:
    """Snapshot key for a debug leaf, identified by its target path."""
    return f"{LEAF_PREFIX}{target_path}"


class ModificationSignature(BaseModel):
    """Last observed state of one artifact.

    Attributes:
        modified_at: Last modification time of the artifact's inputs.
        fingerprint: Serialized formula, None for leaves and formula-less assets.
    """

    modified_at: float | None = Field(default=None, description="Last modification time")
    fingerprint: str | None = Field(default=None, description="Serialized formula")


class Snapshot(BaseModel):
    """Mapping of artifact key to its last observed signature."""

    entries: dict[str, ModificationSignature] = Field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str) -> ModificationSignature | None:
        """Get the stored signature for ``key``, if any."""
        return self.entries.get(key)

    def record(self, key: str, signature: ModificationSignature) -> None:
        """Store ``signature`` as the latest observation for ``key``."""
        self.entries[key] = signature
