"""Locate provider registration calls inside transaction input.

Providers are usually registered through a Safe multisig, so the
`addServiceProvider` call can sit at the top level of the transaction input,
inside `execTransaction(...)`'s `data` argument, or inside a `multiSend`
batch (possibly a multiSend executed by the Safe).
"""

from __future__ import annotations

import logging

from eth_utils import to_checksum_address  # type: ignore[attr-defined]

from pdpind.constants import (
    ADD_SERVICE_PROVIDER_SELECTOR,
    ADDRESS_SIZE,
    EXEC_TRANSACTION_SELECTOR,
    MULTI_SEND_SELECTOR,
    SELECTOR_SIZE,
    WORD_SIZE,
)
from pdpind.decoding.abi import AddServiceProviderParams, decode_add_service_provider, read_bytes_at
from pdpind.decoding.utils import Buffer, equals, to_uint256, view

logger = logging.getLogger(__name__)

MAX_CALL_DEPTH = 4

# multiSend entry: operation(1) | to(20) | value(32) | dataLength(32) | data
_MULTI_SEND_HEADER = 1 + ADDRESS_SIZE + 2 * WORD_SIZE


def iter_multi_send(packed: Buffer) -> list[memoryview]:
    """Split a packed multiSend `transactions` blob into inner call data.

    A truncated entry ends the scan; entries decoded before it are kept.
    """
    calls: list[memoryview] = []
    pos = 0
    while pos + _MULTI_SEND_HEADER <= len(packed):
        length = to_uint256(packed, pos + 1 + ADDRESS_SIZE + WORD_SIZE)
        start = pos + _MULTI_SEND_HEADER
        if length > len(packed) - start:
            logger.debug("truncated multiSend entry at %d", pos)
            break
        calls.append(view(packed, start, length))
        pos = start + length
    return calls


def _find(call: Buffer, provider: str | None, depth: int) -> AddServiceProviderParams | None:
    if depth > MAX_CALL_DEPTH or len(call) < SELECTOR_SIZE:
        return None

    if equals(call, 0, ADD_SERVICE_PROVIDER_SELECTOR):
        params = decode_add_service_provider(call)
        if provider is None or params.provider == provider:
            return params
        return None

    if equals(call, 0, EXEC_TRANSACTION_SELECTOR):
        # execTransaction(to, value, data, ...): data is the third argument
        inner = read_bytes_at(call, SELECTOR_SIZE + 2 * WORD_SIZE, SELECTOR_SIZE)
        return _find(inner, provider, depth + 1)

    if equals(call, 0, MULTI_SEND_SELECTOR):
        packed = read_bytes_at(call, SELECTOR_SIZE, SELECTOR_SIZE)
        for inner in iter_multi_send(packed):
            found = _find(inner, provider, depth + 1)
            if found is not None:
                return found
    return None


def find_add_service_provider(call_input: Buffer, provider: str | None = None) -> AddServiceProviderParams | None:
    """Return the first `addServiceProvider` params found in `call_input`.

    When `provider` is given, only a call registering that address matches.
    """
    if provider is not None:
        provider = to_checksum_address(provider)
    return _find(call_input, provider, 0)
