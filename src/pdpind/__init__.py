from __future__ import annotations

from .constants import ADD_SERVICE_PROVIDER, EXEC_TRANSACTION, MULTI_SEND, WARM_STORAGE
from .core.config import ProjectorConfig, SnapshotConfig
from .core.models import EventLog
from .decoding.registries import make_default_registry, make_pdp_verifier_registry, make_warm_storage_registry
from .indexing import SumTree, generate_challenge_index
from .projection import EventProjector, OutOfOrderEventError
from .storage import MemoryEntityStore, SnapshotWriter

__all__ = [
    "EventProjector",
    "OutOfOrderEventError",
    "EventLog",
    "ProjectorConfig",
    "SnapshotConfig",
    "SumTree",
    "generate_challenge_index",
    "MemoryEntityStore",
    "SnapshotWriter",
    "make_default_registry",
    "make_pdp_verifier_registry",
    "make_warm_storage_registry",
    "ADD_SERVICE_PROVIDER",
    "EXEC_TRANSACTION",
    "MULTI_SEND",
    "WARM_STORAGE",
]
