"""Projected entities persisted through the entity store.

Every entity carries a string `id` (its store key) and a `kind` class
attribute naming its table. Integers are unbounded Python ints; they are
only stringified when exported (uint256 does not fit any Arrow type).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal, TypeVar, Union

from pdpind.constants import ZERO_ADDRESS

ProviderStatus = Literal["registered", "approved", "rejected", "removed"]


def node_key(tree_id: int, node_index: int) -> str:
    return f"{tree_id}-{node_index}"


def piece_key(set_id: int, piece_id: int) -> str:
    return f"{set_id}-{piece_id}"


@dataclass(slots=True)
class SumTreeNode:
    """One node of a data set's weighted selection tree."""

    kind: ClassVar[str] = "sum_tree_node"

    id: str
    tree_id: int = 0
    node_index: int = 0
    subtree_sum: int = 0
    last_leaf_weight: int = 0
    last_decay_epoch: int = 0


@dataclass(slots=True)
class DataSet:
    kind: ClassVar[str] = "data_set"

    id: str
    set_id: int = 0
    storage_provider: str = ZERO_ADDRESS
    payer: str = ZERO_ADDRESS
    payee: str = ZERO_ADDRESS
    rail_id: int = 0
    metadata: str = ""
    with_cdn: bool = False
    is_active: bool = True
    leaf_count: int = 0
    next_piece_id: int = 0
    total_pieces: int = 0
    challenge_epoch: int = 0
    last_proven_epoch: int = 0
    total_proven_challenges: int = 0
    total_faulted_periods: int = 0
    created_at_block: int = 0
    updated_at_block: int = 0


@dataclass(slots=True)
class Piece:
    kind: ClassVar[str] = "piece"

    id: str
    set_id: int = 0
    piece_id: int = 0
    leaf_count: int = 0
    metadata: str = ""
    signature: bytes = b""
    removed: bool = False
    total_challenges: int = 0
    last_challenged_epoch: int = 0
    added_at_block: int = 0
    removed_at_block: int = 0


@dataclass(slots=True)
class Provider:
    kind: ClassVar[str] = "provider"

    id: str  # checksum address
    provider_id: int = 0
    pdp_url: str = ""
    piece_retrieval_url: str = ""
    status: ProviderStatus = "registered"
    total_data_sets: int = 0
    total_faulted_periods: int = 0
    registered_at_block: int = 0
    updated_at_block: int = 0


@dataclass(slots=True)
class Rail:
    kind: ClassVar[str] = "rail"

    id: str
    rail_id: int = 0
    data_set_id: int = 0
    payee: str = ZERO_ADDRESS
    rate: int = 0
    updated_at_block: int = 0


@dataclass(slots=True)
class RateChange:
    kind: ClassVar[str] = "rate_change"

    id: str  # "{tx_hash}-{log_index}"
    rail_id: int = 0
    old_rate: int = 0
    new_rate: int = 0
    block_number: int = 0


@dataclass(slots=True)
class FaultRecord:
    kind: ClassVar[str] = "fault_record"

    id: str  # "{tx_hash}-{log_index}"
    data_set_id: int = 0
    provider: str = ZERO_ADDRESS
    periods_faulted: int = 0
    deadline: int = 0
    block_number: int = 0


@dataclass(slots=True)
class ProofChallenge:
    kind: ClassVar[str] = "proof_challenge"

    id: str  # "{tx_hash}-{log_index}-{proof_index}"
    set_id: int = 0
    proof_index: int = 0
    leaf_index: int = 0
    piece_id: int = 0
    offset: int = 0
    block_number: int = 0


Entity = Union[SumTreeNode, DataSet, Piece, Provider, Rail, RateChange, FaultRecord, ProofChallenge]
E = TypeVar("E", SumTreeNode, DataSet, Piece, Provider, Rail, RateChange, FaultRecord, ProofChallenge)

ENTITY_TYPES: tuple[type, ...] = (SumTreeNode, DataSet, Piece, Provider, Rail, RateChange, FaultRecord, ProofChallenge)
