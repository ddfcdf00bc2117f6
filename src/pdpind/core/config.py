from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pdpind.constants import SUMTREE_MAX_HEIGHT


@dataclass(frozen=True)
class ProjectorConfig:
    """Configuration for the event projector."""

    # Only logs emitted by these addresses are projected (empty = all)
    contracts: tuple[str, ...] = ()
    # Reject logs that arrive before the last processed (block, log_index)
    strict_ordering: bool = True
    # Leaf indices of every selection tree must stay below 2**max_tree_height
    max_tree_height: int = SUMTREE_MAX_HEIGHT
    # Upper bound on challenges derived for a single proof event
    max_challenges_per_proof: int = 1_000


@dataclass(frozen=True)
class SnapshotConfig:
    """Configuration for parquet entity snapshots."""

    out_root: Path = Path("./data")
    codec: str = "zstd"
    kinds: tuple[str, ...] = field(default_factory=tuple)  # empty = every entity kind
