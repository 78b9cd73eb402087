"""Change detection against a snapshot of modification signatures."""

from ..models import ModificationSignature, Snapshot
from ..registry import AssetManager
from ..registry.assets import AssetCollection, FileAsset


def has_changed(key: str, signature: ModificationSignature, snapshot: Snapshot) -> bool:
    """Decide whether the artifact under ``key`` changed since last seen.

    A key never seen before is always changed. Otherwise either a new
    modification time or a new fingerprint is a change. The snapshot is
    updated with ``signature`` in every case.

    Args:
        key: Tagged artifact key (see ``main_key``/``leaf_key``)
        signature: Signature observed now
        snapshot: Snapshot shared across the pass, mutated in place

    Returns:
        True if the artifact must be dumped again
    """
    previous = snapshot.get(key)
    snapshot.record(key, signature)
    if previous is None:
        return True
    return (
        previous.modified_at != signature.modified_at
        or previous.fingerprint != signature.fingerprint
    )


def main_signature(registry: AssetManager, name: str) -> ModificationSignature:
    """Observe the signature of a named main asset.

    Raises:
        ResolutionError: If the registry cannot resolve ``name``
    """
    formula = registry.get_formula(name) if registry.has_formula(name) else None
    asset = registry.get(name)
    return ModificationSignature(
        modified_at=asset.last_modified(),
        fingerprint=formula.fingerprint() if formula is not None else None,
    )


def leaf_signature(leaf: FileAsset | AssetCollection) -> ModificationSignature:
    """Observe the signature of a debug leaf (timestamp only)."""
    return ModificationSignature(modified_at=leaf.last_modified())
