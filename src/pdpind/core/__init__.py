"""Core data models, entities, configuration and interfaces.

This package provides:
- Input models (EventLog, Meta)
- Projected entities (DataSet, Piece, Provider, SumTreeNode, ...)
- Configuration classes (ProjectorConfig, SnapshotConfig)
- The entity store protocol (IEntityStore)
"""

from pdpind.core.config import ProjectorConfig, SnapshotConfig
from pdpind.core.entities import (
    DataSet,
    FaultRecord,
    Piece,
    ProofChallenge,
    Provider,
    Rail,
    RateChange,
    SumTreeNode,
)
from pdpind.core.interfaces import IEntityStore
from pdpind.core.models import EventLog, Meta

__all__ = [
    "ProjectorConfig",
    "SnapshotConfig",
    "DataSet",
    "FaultRecord",
    "Piece",
    "ProofChallenge",
    "Provider",
    "Rail",
    "RateChange",
    "SumTreeNode",
    "IEntityStore",
    "EventLog",
    "Meta",
]
