from typing import Callable

import pytest

from pdpind.core.models import EventLog
from pdpind.decoding.registries import make_default_registry
from pdpind.indexing.sum_tree import SumTree
from pdpind.storage.memory import MemoryEntityStore

from payloads import VERIFIER, topic


@pytest.fixture
def registry():
    return make_default_registry()


@pytest.fixture
def topic0s(registry) -> dict[str, str]:
    return {spec.name: topic0 for topic0, spec in registry.items()}


@pytest.fixture
def store() -> MemoryEntityStore:
    return MemoryEntityStore()


@pytest.fixture
def tree(store: MemoryEntityStore) -> SumTree:
    return SumTree(store, max_height=8)


@pytest.fixture
def make_log(topic0s: dict[str, str]) -> Callable[..., EventLog]:
    """Build an EventLog for a known event; each call lands in a later block."""
    counter = {"n": 0}

    def _make(
        name: str,
        indexed: tuple[int | str, ...] = (),
        data: bytes = b"",
        *,
        block: int | None = None,
        log_index: int = 0,
        tx_input: bytes | None = None,
    ) -> EventLog:
        counter["n"] += 1
        n = counter["n"]
        return EventLog(
            address=VERIFIER,
            topics=(topic0s[name], *(topic(v) for v in indexed)),
            data_hex="0x" + data.hex(),
            block_number=block if block is not None else 100 + n,
            tx_hash=f"0x{n:064x}",
            log_index=log_index,
            block_timestamp=1_700_000_000 + n,
            tx_input=None if tx_input is None else "0x" + tx_input.hex(),
        )

    return _make
