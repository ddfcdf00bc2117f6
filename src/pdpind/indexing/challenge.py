"""Deterministic challenge index derivation.

    index = keccak256(pad32(seed) ‖ uint256(dataSetId) ‖ uint256(proofIndex)) mod totalLeaves

Any verifier holding the committed seed recomputes the same leaf index.
"""

from __future__ import annotations

from collections.abc import Iterator

from eth_utils import keccak

from pdpind.constants import WORD_SIZE
from pdpind.decoding.utils import Buffer, to_uint256


def _word(value: int) -> bytes:
    return value.to_bytes(WORD_SIZE, "big")


def generate_challenge_index(seed: Buffer, data_set_id: int, proof_index: int, total_leaves: int) -> int | None:
    """Leaf index challenged by proof `proof_index`, or None if the data set has no leaves."""
    if total_leaves <= 0:
        return None
    padded = bytes(seed).rjust(WORD_SIZE, b"\x00")
    digest = keccak(padded + _word(data_set_id) + _word(proof_index))
    return to_uint256(digest, 0) % total_leaves


def generate_challenge_indices(seed: Buffer, data_set_id: int, count: int, total_leaves: int) -> Iterator[int]:
    """Challenge indices for proof indices `0 .. count - 1` (nothing when there are no leaves)."""
    if total_leaves <= 0:
        return
    for proof_index in range(count):
        index = generate_challenge_index(seed, data_set_id, proof_index, total_leaves)
        if index is not None:
            yield index
