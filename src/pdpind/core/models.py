"""Input records handed to the projector.

This module defines:
- `EventLog`: raw log as delivered by the indexing runtime.
- `Meta`: the per-log metadata carried through decoding and projection.
"""

from __future__ import annotations

import string
from dataclasses import dataclass


def hex_to_bytes(h: str | None) -> bytes | None:
    """Decode an optional 0x-prefixed hex string ("" / None → b"").

    Returns None when `h` has odd length or non-hex characters.
    """
    if not h:
        return b""
    h = h[2:] if h[:2].lower() == "0x" else h
    if len(h) % 2 or any(c not in string.hexdigits for c in h):
        return None
    return bytes.fromhex(h)


@dataclass(slots=True, frozen=True)
class EventLog:
    """Raw log, minimally normalized.

    `tx_input` is the input of the emitting transaction when the runtime
    provides it; provider registrations read their URLs from it.
    """

    address: str  # 0x...
    topics: tuple[str, ...]  # lowercased 0x...
    data_hex: str  # "0x..."
    block_number: int
    tx_hash: str  # lowercased 0x...
    log_index: int
    block_timestamp: int | None = None
    tx_input: str | None = None  # "0x..."

    @property
    def position(self) -> tuple[int, int]:
        """Delivery order key."""
        return (self.block_number, self.log_index)


@dataclass(slots=True)
class Meta:
    """Lightweight metadata for a single log used during decoding."""

    block_number: int
    block_timestamp: int | None
    tx_hash: str
    log_index: int
    address: str

    @classmethod
    def from_log(cls, log: EventLog) -> Meta:
        return cls(
            block_number=log.block_number,
            block_timestamp=log.block_timestamp,
            tx_hash=log.tx_hash,
            log_index=log.log_index,
            address=log.address,
        )
