"""Manual head/tail ABI decoding for the fixed payload shapes we index.

Layout reminder
---------------
A payload is a *head* of 32-byte slots followed by a *tail*. Static values
(address, bool, uintN) sit directly in their head slot; dynamic values
(string, bytes, T[]) store a byte offset in their head slot pointing at a tail
entry made of a length word followed by the content, right-padded to a word
boundary.

Nothing in this module raises on malformed input: an offset or length that
points outside the payload turns that one field into its zero value while
sibling fields keep decoding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from eth_utils import to_checksum_address  # type: ignore[attr-defined]

from pdpind.constants import (
    ADDRESS_SIZE,
    MIN_ADD_SERVICE_PROVIDER_SIZE,
    SELECTOR_SIZE,
    WORD_SIZE,
    ZERO_ADDRESS,
)
from pdpind.decoding.utils import Buffer, to_bytes, to_uint256, view

logger = logging.getLogger(__name__)


# ---------- tagged values ----------


class AbiType(Enum):
    STRING = "string"
    ADDRESS = "address"
    BOOL = "bool"
    BYTES = "bytes"
    UINT256 = "uint256"


class AbiValues:
    @dataclass(frozen=True, kw_only=True)
    class String:
        value: str = ""
        type: ClassVar[AbiType] = AbiType.STRING

    @dataclass(frozen=True, kw_only=True)
    class Address:
        value: str = ZERO_ADDRESS
        type: ClassVar[AbiType] = AbiType.ADDRESS

    @dataclass(frozen=True, kw_only=True)
    class Bool:
        value: bool = False
        type: ClassVar[AbiType] = AbiType.BOOL

    @dataclass(frozen=True, kw_only=True)
    class Bytes:
        value: bytes = b""
        type: ClassVar[AbiType] = AbiType.BYTES

    @dataclass(frozen=True, kw_only=True)
    class Uint256:
        value: int = 0
        type: ClassVar[AbiType] = AbiType.UINT256


AbiValue = AbiValues.String | AbiValues.Address | AbiValues.Bool | AbiValues.Bytes | AbiValues.Uint256


# ---------- result records ----------


@dataclass(frozen=True)
class StringAddressBoolBytesResult:
    string_value: str = ""
    address_value: str = ZERO_ADDRESS
    bool_value: bool = False
    bytes_value: bytes = b""


@dataclass(frozen=True)
class BytesStringResult:
    bytes_value: bytes = b""
    string_value: str = ""


@dataclass(frozen=True)
class AddServiceProviderParams:
    provider: str = ZERO_ADDRESS
    pdp_url: str = ""
    piece_retrieval_url: str = ""


# ---------- slot readers ----------


def _utf8(raw: Buffer) -> str:
    return bytes(raw).decode("utf-8", errors="replace")


def _tail(data: Buffer, head_pos: int, base: int = 0) -> memoryview | None:
    """Follow the offset stored at `head_pos` to its tail content.

    Offsets are relative to `base` (the start of the argument block).
    Returns None when the head slot, length word or content is out of range.
    """
    if head_pos < 0 or head_pos + WORD_SIZE > len(data):
        return None
    start = base + to_uint256(data, head_pos)
    if start + WORD_SIZE > len(data):
        return None
    length = to_uint256(data, start)
    content = start + WORD_SIZE
    if length > len(data) - content:
        return None
    return view(data, content, length)


def read_address_at(data: Buffer, head_pos: int) -> str:
    """Checksummed address right-aligned in the word at `head_pos`."""
    if head_pos < 0 or head_pos + WORD_SIZE > len(data):
        return ZERO_ADDRESS
    raw = view(data, head_pos + WORD_SIZE - ADDRESS_SIZE, ADDRESS_SIZE)
    return to_checksum_address("0x" + bytes(raw).hex())


def read_bool_at(data: Buffer, head_pos: int) -> bool:
    return to_uint256(data, head_pos) != 0


def read_bytes_at(data: Buffer, head_pos: int, base: int = 0) -> bytes:
    raw = _tail(data, head_pos, base)
    return b"" if raw is None else to_bytes(raw)


def read_string_at(data: Buffer, head_pos: int, base: int = 0) -> str:
    raw = _tail(data, head_pos, base)
    return "" if raw is None else _utf8(raw)


def read_uint256_array_at(data: Buffer, head_pos: int, base: int = 0) -> list[int]:
    """Decode a `uint256[]` tail: a count word followed by `count` words."""
    if head_pos < 0 or head_pos + WORD_SIZE > len(data):
        return []
    start = base + to_uint256(data, head_pos)
    if start + WORD_SIZE > len(data):
        return []
    count = to_uint256(data, start)
    first = start + WORD_SIZE
    if count > (len(data) - first) // WORD_SIZE:
        return []
    return [to_uint256(data, first + i * WORD_SIZE) for i in range(count)]


def decode_value(data: Buffer, word_index: int, abi_type: str) -> AbiValue:
    """Decode the head slot `word_index` as `abi_type`.

    Unsigned integers of any width come back as `Uint256`, fixed `bytesN`
    as `Bytes` truncated to N. Unknown types yield the raw word as `Bytes`.
    """
    pos = word_index * WORD_SIZE
    if abi_type == "address":
        return AbiValues.Address(value=read_address_at(data, pos))
    if abi_type == "bool":
        return AbiValues.Bool(value=read_bool_at(data, pos))
    if abi_type == "string":
        return AbiValues.String(value=read_string_at(data, pos))
    if abi_type == "bytes":
        return AbiValues.Bytes(value=read_bytes_at(data, pos))
    if abi_type.startswith("uint"):
        return AbiValues.Uint256(value=to_uint256(data, pos))
    if pos < 0 or pos + WORD_SIZE > len(data):
        return AbiValues.Bytes()
    word = to_bytes(view(data, pos, WORD_SIZE))
    if abi_type.startswith("bytes") and abi_type[5:].isdigit():
        return AbiValues.Bytes(value=word[: int(abi_type[5:])])
    return AbiValues.Bytes(value=word)


# ---------- fixed shapes ----------


def decode_string_address_bool_bytes(data: Buffer) -> StringAddressBoolBytesResult:
    """Decode `(string, address, bool, bytes)`.

    Used for data-set creation `extraData`: (metadata, payer, withCDN, signature).
    """
    if len(data) < 4 * WORD_SIZE:
        logger.debug("string/address/bool/bytes payload too short (%d bytes)", len(data))
        return StringAddressBoolBytesResult()
    return StringAddressBoolBytesResult(
        string_value=read_string_at(data, 0),
        address_value=read_address_at(data, WORD_SIZE),
        bool_value=read_bool_at(data, 2 * WORD_SIZE),
        bytes_value=read_bytes_at(data, 3 * WORD_SIZE),
    )


def decode_bytes_string(data: Buffer) -> BytesStringResult:
    """Decode `(bytes, string)`, e.g. piece `extraData`: (signature, metadata)."""
    if len(data) < 2 * WORD_SIZE:
        logger.debug("bytes/string payload too short (%d bytes)", len(data))
        return BytesStringResult()
    return BytesStringResult(
        bytes_value=read_bytes_at(data, 0),
        string_value=read_string_at(data, WORD_SIZE),
    )


def decode_add_service_provider(data: Buffer) -> AddServiceProviderParams:
    """Decode `addServiceProvider(address provider, string pdpUrl, string pieceRetrievalUrl)` call data.

    `data` includes the 4-byte selector; tail offsets are relative to the
    first argument word.
    """
    if len(data) < SELECTOR_SIZE + MIN_ADD_SERVICE_PROVIDER_SIZE:
        logger.debug("addServiceProvider call data too short (%d bytes)", len(data))
        return AddServiceProviderParams()
    base = SELECTOR_SIZE
    return AddServiceProviderParams(
        provider=read_address_at(data, base),
        pdp_url=read_string_at(data, base + WORD_SIZE, base),
        piece_retrieval_url=read_string_at(data, base + 2 * WORD_SIZE, base),
    )
