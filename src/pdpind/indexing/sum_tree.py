"""Persistent weighted selection index (binary indexed tree per data set).

Node `i` stores the total weight of the `2**h` leaves ending at `i`, where
`h = height_from_index(i)` is the number of trailing zero bits of `i + 1`.
Nodes live in the entity store under `"{tree_id}-{i}"` and are fetched by
computed index on every traversal; no topology is cached in memory.

Every tree spans leaves `[0, 2**max_height)`. An update walks from the leaf
to the root of that span (`i += 2**h(i)`), so nodes stay correct no matter
how many leaves the data set ends up with, and a selection over the first
`n` leaves only reads nodes below `n`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pdpind.constants import SUMTREE_MAX_HEIGHT
from pdpind.core.entities import SumTreeNode, node_key
from pdpind.core.interfaces import IEntityStore

logger = logging.getLogger(__name__)


def height_from_index(index: int) -> int:
    """Trailing zero bits of `index + 1`."""
    n = index + 1
    return (n & -n).bit_length() - 1


@dataclass(frozen=True)
class Selection:
    """Leaf hit by a selection and the target's offset inside that leaf."""

    leaf_index: int
    offset: int


class SumTree:
    """Fenwick tree over the entity store.

    Parameters
    ----------
    store : IEntityStore
        Where nodes are loaded from and saved to.
    max_height : int
        Leaves are indexed `0 .. 2**max_height - 1`.
    """

    def __init__(self, store: IEntityStore, *, max_height: int = SUMTREE_MAX_HEIGHT) -> None:
        if max_height <= 0:
            raise ValueError("max_height must be positive")
        self.store = store
        self.max_height = max_height
        self.bound = (1 << max_height) - 1  # last node index of every tree

    # ---------- node access ----------

    def _load(self, tree_id: int, index: int) -> SumTreeNode | None:
        return self.store.load(SumTreeNode, node_key(tree_id, index))

    def _node_sum(self, tree_id: int, index: int) -> int:
        node = self._load(tree_id, index)
        return 0 if node is None else node.subtree_sum

    def _check_leaf(self, leaf_index: int) -> None:
        if leaf_index < 0 or leaf_index > self.bound:
            raise ValueError(f"leaf index {leaf_index} outside [0, {self.bound}]")

    def _path(self, leaf_index: int) -> list[int]:
        """Indices of the leaf node and all of its ancestors within the bound."""
        path: list[int] = []
        index = leaf_index
        while index <= self.bound:
            path.append(index)
            index += 1 << height_from_index(index)
        return path

    # ---------- updates ----------

    def inc(self, tree_id: int, leaf_index: int, delta: int) -> None:
        """Add `delta` to a leaf's weight."""
        if delta < 0:
            raise ValueError("delta must be non-negative")
        self._check_leaf(leaf_index)
        for index in self._path(leaf_index):
            key = node_key(tree_id, index)
            node = self.store.load(SumTreeNode, key)
            if node is None:
                node = self.store.new(SumTreeNode, key)
                node.tree_id = tree_id
                node.node_index = index
            node.subtree_sum += delta
            self.store.save(node)
        logger.debug("tree %d: leaf %d += %d", tree_id, leaf_index, delta)

    def dec(self, tree_id: int, leaf_index: int, delta: int, epoch: int) -> None:
        """Subtract `delta` from a leaf's weight, stamping `epoch` on every touched node.

        A leaf that was never incremented is left alone. Removing more than
        the leaf currently weighs raises ValueError without touching the tree.
        """
        if delta < 0:
            raise ValueError("delta must be non-negative")
        self._check_leaf(leaf_index)
        if self._load(tree_id, leaf_index) is None:
            logger.debug("tree %d: dec on missing leaf %d ignored", tree_id, leaf_index)
            return
        weight = self.leaf_weight(tree_id, leaf_index)
        if delta > weight:
            raise ValueError(f"cannot remove {delta} from leaf {leaf_index} of weight {weight}")

        for index in self._path(leaf_index):
            node = self._load(tree_id, index)
            if node is None:
                node = self.store.new(SumTreeNode, node_key(tree_id, index))
                node.tree_id = tree_id
                node.node_index = index
            node.last_leaf_weight = node.subtree_sum
            node.subtree_sum -= delta
            node.last_decay_epoch = epoch
            self.store.save(node)
        logger.debug("tree %d: leaf %d -= %d at epoch %d", tree_id, leaf_index, delta, epoch)

    # ---------- queries ----------

    def prefix_sum(self, tree_id: int, count: int) -> int:
        """Total weight of leaves `[0, count)`."""
        count = min(count, self.bound + 1)
        total = 0
        while count > 0:
            total += self._node_sum(tree_id, count - 1)
            count &= count - 1
        return total

    def range_sum(self, tree_id: int, start: int, end: int) -> int:
        """Total weight of leaves `[start, end)`."""
        if end <= start:
            return 0
        return self.prefix_sum(tree_id, end) - self.prefix_sum(tree_id, start)

    def leaf_weight(self, tree_id: int, leaf_index: int) -> int:
        """Current weight of a single leaf: its node minus the children it aggregates."""
        weight = self._node_sum(tree_id, leaf_index)
        for i in range(height_from_index(leaf_index)):
            weight -= self._node_sum(tree_id, leaf_index - (1 << i))
        return weight

    def total(self, tree_id: int, leaf_count: int) -> int:
        return self.prefix_sum(tree_id, leaf_count)

    def select(self, tree_id: int, target: int, leaf_count: int) -> Selection | None:
        """Find the leaf whose cumulative weight range contains `target`.

        Descends from the largest power-of-two span not exceeding
        `leaf_count`: when `target` reaches past a span's sum, the sum is
        subtracted and the search moves to the next sibling span, otherwise it
        narrows into the span. Returns None when nothing can be selected
        (empty tree or `target` at/after the total weight).
        """
        leaf_count = min(leaf_count, self.bound + 1)
        if leaf_count <= 0 or target < 0:
            return None

        pos = 0  # leaves [0, pos) are entirely before target
        remaining = target
        step = 1 << (leaf_count.bit_length() - 1)
        while step:
            candidate = pos + step
            if candidate <= leaf_count:
                span = self._node_sum(tree_id, candidate - 1)
                if remaining >= span:
                    pos = candidate
                    remaining -= span
            step >>= 1

        if pos >= leaf_count:
            return None
        return Selection(leaf_index=pos, offset=remaining)
