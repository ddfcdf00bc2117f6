"""Weighted piece selection and challenge derivation.

This package provides:
- SumTree: persistent binary indexed tree with weighted selection
- generate_challenge_index: seed → challenged leaf index
"""

from pdpind.indexing.challenge import generate_challenge_index, generate_challenge_indices
from pdpind.indexing.sum_tree import Selection, SumTree, height_from_index

__all__ = [
    "SumTree",
    "Selection",
    "height_from_index",
    "generate_challenge_index",
    "generate_challenge_indices",
]
