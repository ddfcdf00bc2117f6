"""Helpers that build ABI-encoded payloads and topics for tests."""

from typing import Any

from pdpind.constants import (
    ADD_SERVICE_PROVIDER_SELECTOR,
    EXEC_TRANSACTION_SELECTOR,
    MULTI_SEND_SELECTOR,
    WARM_STORAGE,
    ZERO_ADDRESS,
)

PROVIDER = "0x1234567890123456789012345678901234567890"
PAYER = "0x00000000000000000000000000000000000000aa"
PAYEE = "0x00000000000000000000000000000000000000bb"
VERIFIER = "0x00000000000000000000000000000000000000f0"


def word(value: int) -> bytes:
    return value.to_bytes(32, "big")


def address_word(address: str) -> bytes:
    return bytes(12) + bytes.fromhex(address[2:])


def _padded(raw: bytes) -> bytes:
    return raw + bytes(-len(raw) % 32)


def abi_encode(*items: tuple[str, Any]) -> bytes:
    """Minimal head/tail encoder.

    Items are (type, value) with type in uint/address/bool/bytes32/bytes/string/uint[].
    """
    head_size = 32 * len(items)
    head = b""
    tail = b""
    for typ, value in items:
        if typ == "uint":
            head += word(value)
        elif typ == "address":
            head += address_word(value)
        elif typ == "bool":
            head += word(1 if value else 0)
        elif typ == "bytes32":
            head += value.rjust(32, b"\x00")
        else:
            head += word(head_size + len(tail))
            if typ == "uint[]":
                tail += word(len(value)) + b"".join(word(v) for v in value)
            else:
                raw = value.encode() if typ == "string" else value
                tail += word(len(raw)) + _padded(raw)
    return head + tail


def topic(value: int | str) -> str:
    if isinstance(value, str):
        return "0x" + address_word(value).hex()
    return "0x" + word(value).hex()


# ---------- provider registration call data ----------

OTHER = "0x9999999999999999999999999999999999999999"


def add_provider_call(provider: str = PROVIDER, pdp_url: str = "https://pdp.example") -> bytes:
    return ADD_SERVICE_PROVIDER_SELECTOR + abi_encode(
        ("address", provider), ("string", pdp_url), ("string", "https://retrieve.example")
    )


def exec_transaction(inner: bytes) -> bytes:
    """Safe `execTransaction(to, value, data, operation, safeTxGas, baseGas, gasPrice, gasToken, refundReceiver, signatures)`."""
    return EXEC_TRANSACTION_SELECTOR + abi_encode(
        ("address", WARM_STORAGE),
        ("uint", 0),
        ("bytes", inner),
        ("uint", 0),
        ("uint", 0),
        ("uint", 0),
        ("uint", 0),
        ("address", ZERO_ADDRESS),
        ("address", ZERO_ADDRESS),
        ("bytes", b"\x11" * 65),
    )


def pack(*calls: bytes) -> bytes:
    """Packed multiSend entries: operation | to | value | dataLength | data."""
    out = b""
    for call in calls:
        out += b"\x00" + bytes.fromhex(WARM_STORAGE[2:]) + word(0) + word(len(call)) + call
    return out


def multi_send(*calls: bytes) -> bytes:
    return MULTI_SEND_SELECTOR + abi_encode(("bytes", pack(*calls)))
