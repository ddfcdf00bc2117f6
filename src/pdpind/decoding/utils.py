"""Byte-level decoding primitives: ranged equality, ABI words, integer views.

Every reader here is bounds-checked and returns a zero value instead of
raising when the requested range runs past the end of the buffer. Higher
level decoders rely on that to degrade malformed payloads into defaults.
"""

from __future__ import annotations

from typing import Any, Union

from eth_utils import to_checksum_address  # type: ignore[attr-defined]

from pdpind.constants import WORD_SIZE
from pdpind.decoding.specs import TopicFieldSpec

Buffer = Union[bytes, bytearray, memoryview]


def _fits(data: Buffer, start: int, length: int) -> bool:
    """True when `data[start:start + length]` lies fully inside `data`."""
    return start >= 0 and length >= 0 and start + length <= len(data)


def equals(a: Buffer, a_start: int, b: Buffer, b_start: int = 0, length: int | None = None) -> bool:
    """Compare `length` bytes of `a` at `a_start` with `b` at `b_start`.

    `length` defaults to the remainder of `b`. Returns False when either
    range would read past its buffer. Zero-length ranges compare equal.
    """
    if length is None:
        length = len(b) - b_start
    if not _fits(a, a_start, length) or not _fits(b, b_start, length):
        return False
    return bytes(a[a_start : a_start + length]) == bytes(b[b_start : b_start + length])


def to_uint256(data: Buffer, offset: int) -> int:
    """Big-endian unsigned word at `offset`, or 0 if fewer than 32 bytes remain."""
    if not _fits(data, offset, WORD_SIZE):
        return 0
    return int.from_bytes(data[offset : offset + WORD_SIZE], "big", signed=False)


def to_i32(data: Buffer, offset: int) -> int:
    """Signed 32-bit value held in the last 4 bytes of the word at `offset`."""
    if not _fits(data, offset, WORD_SIZE):
        return 0
    end = offset + WORD_SIZE
    return int.from_bytes(data[end - 4 : end], "big", signed=True)


def view(data: Buffer, start: int, length: int) -> memoryview:
    """Zero-copy window of `length` bytes starting at `start`."""
    if not _fits(data, start, length):
        raise IndexError(f"view [{start}, {start + length}) outside buffer of {len(data)} bytes")
    return memoryview(data)[start : start + length]


def to_bytes(data: Buffer) -> bytes:
    """Detach a (possibly borrowed) byte range into an immutable value."""
    return bytes(data)


def word_at(data: Buffer, i: int) -> bytes:
    """Return the i-th 32-byte ABI word (zero-filled if out of range)."""
    start = WORD_SIZE * i
    if not _fits(data, start, WORD_SIZE):
        return b"\x00" * WORD_SIZE
    return bytes(data[start : start + WORD_SIZE])


def parse_topic_field(topic_hex: str, spec: TopicFieldSpec) -> Any:
    """Parse one indexed topic according to the declared type."""
    t = spec.type
    h = topic_hex.lower()
    if t == "address":
        return to_checksum_address("0x" + h[-40:])
    if t.startswith("uint"):
        return int(h, 16)
    if t.startswith("int"):
        bits = int(t[3:]) if t != "int" else 256
        v = int(h, 16) & ((1 << bits) - 1)
        return v - (1 << bits) if v >= 1 << (bits - 1) else v
    if t == "bool":
        return int(h, 16) != 0
    # bytes32 / hashed dynamic values: raw hex
    return h
