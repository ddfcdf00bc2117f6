"""Entity stores and exports.

This package provides:
- MemoryEntityStore: copy-on-load dict store implementing IEntityStore
- SnapshotWriter: parquet export, one table per entity kind
"""

from pdpind.storage.memory import MemoryEntityStore
from pdpind.storage.snapshot import SnapshotWriter, entities_to_table

__all__ = [
    "MemoryEntityStore",
    "SnapshotWriter",
    "entities_to_table",
]
