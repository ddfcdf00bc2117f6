"""Event registries for the proof-of-data-possession contracts.

Two emitters are indexed:
- PDP verifier: data sets, pieces, proving periods and proofs
- Warm storage service: payment rails, providers and faults

All registries are composable and can be merged with `{**a, **b}` syntax.

Example
-------
>>> from pdpind.decoding.registries import make_pdp_verifier_registry, make_warm_storage_registry
>>> reg = {**make_pdp_verifier_registry(), **make_warm_storage_registry()}
"""

from __future__ import annotations

from .registry_builder import make_registry
from .specs import EventRegistry

PDP_VERIFIER_EVENTS = [
    "DataSetCreated(uint256 indexed setId, address indexed storageProvider)",
    "DataSetDeleted(uint256 indexed setId, uint256 deletedLeafCount)",
    "PiecesAdded(uint256 indexed setId, uint256[] pieceIds, uint256[] leafCounts, bytes extraData)",
    "PiecesRemoved(uint256 indexed setId, uint256[] pieceIds)",
    "NextProvingPeriod(uint256 indexed setId, uint256 challengeEpoch, uint256 leafCount)",
    "PossessionProven(uint256 indexed setId, bytes32 seed, uint256 challengeCount)",
    "StorageProviderChanged(uint256 indexed setId, address indexed oldStorageProvider, address indexed newStorageProvider)",
]

WARM_STORAGE_EVENTS = [
    "DataSetRailCreated(uint256 indexed dataSetId, uint256 indexed railId, address indexed payee, bytes extraData)",
    "ProviderRegistered(address indexed provider)",
    "ProviderApproved(address indexed provider, uint256 indexed providerId)",
    "ProviderRejected(address indexed provider)",
    "ProviderRemoved(address indexed provider, uint256 indexed providerId)",
    "FaultRecord(uint256 indexed dataSetId, uint256 periodsFaulted, uint256 deadline)",
    "RailRateUpdated(uint256 indexed railId, uint256 newRate)",
]


def make_pdp_verifier_registry() -> EventRegistry:
    """Return registry for PDP verifier events."""
    return make_registry(PDP_VERIFIER_EVENTS)


def make_warm_storage_registry() -> EventRegistry:
    """Return registry for warm storage service events."""
    return make_registry(WARM_STORAGE_EVENTS)


def make_default_registry() -> EventRegistry:
    """Both emitters in one registry."""
    return {**make_pdp_verifier_registry(), **make_warm_storage_registry()}
