"""Generic event decoder driven by an `EventRegistry`.

This module translates raw logs into `ParsedEvent`. Indexed fields come from
topics; non-indexed fields come from head slots of the data section, with
dynamic fields (`string`, `bytes`, `uint256[]`) resolved through the manual
ABI tail readers. A malformed dynamic field decodes to its zero value; it
never drops the event.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from eth_utils import to_checksum_address  # type: ignore[attr-defined]

from pdpind.constants import WORD_SIZE
from pdpind.core.models import Meta
from pdpind.decoding.abi import decode_value, read_uint256_array_at
from pdpind.decoding.specs import DataFieldSpec, EventRegistry, EventSpec, resolve_projection_ref
from pdpind.decoding.utils import parse_topic_field, to_uint256

logger = logging.getLogger(__name__)

# ---------- parsed event ----------


@dataclass(slots=True)
class ParsedEvent:
    """Decoded event with open-ended `values` keyed by projection name."""

    name: str
    contract: str
    meta: Meta
    values: dict[str, Any]


# ---------- helper functions ----------


def _validate_and_get_spec(topics: Sequence[str], registry: EventRegistry) -> EventSpec | None:
    """Return the spec for topic0, or None if topics are empty or unknown."""
    if not topics:
        return None
    return registry.get(topics[0].lower())


def parse_data_field(data: bytes, df: DataFieldSpec) -> Any:
    """Parse one data field according to its declared type."""
    typ = df.type
    pos = df.word_index * WORD_SIZE
    if typ.endswith("[]"):
        if typ[:-2].startswith("uint"):
            return read_uint256_array_at(data, pos)
        logger.debug("unsupported array type %s for field %s", typ, df.name)
        return []
    if typ.startswith("int"):
        v = to_uint256(data, pos)
        bits = int(typ[3:]) if typ != "int" else 256
        v &= (1 << bits) - 1
        return v - (1 << bits) if v >= 1 << (bits - 1) else v
    return decode_value(data, df.word_index, typ).value


# ---------- main generic decoder ----------


def decode_event(
    *,
    topics: Sequence[str],
    data: bytes,
    meta: Meta,
    registry: EventRegistry,
) -> ParsedEvent | None:
    """Decode raw log (topics + data) into a `ParsedEvent`.

    Returns None when topic0 is unknown, an indexed topic is missing, or the
    data section is shorter than the event's static head.
    """
    spec = _validate_and_get_spec(topics, registry)
    if spec is None:
        return None

    if len(topics) < spec.min_topics:
        logger.debug("%s: expected %d topics, got %d", spec.name, spec.min_topics, len(topics))
        return None
    topic_vals: dict[str, Any] = {tf.name: parse_topic_field(topics[tf.index], tf) for tf in spec.topic_fields}

    if len(data) < WORD_SIZE * spec.static_words:
        logger.debug("%s: data too short (%d bytes)", spec.name, len(data))
        return None

    data_vals: dict[str, Any] = {df.name: parse_data_field(data, df) for df in spec.data_fields}

    resolved: dict[str, Any] = {
        out_key: resolve_projection_ref(ref, topic_vals, data_vals) for out_key, ref in spec.projection.items()
    }

    return ParsedEvent(
        name=spec.name,
        contract=to_checksum_address(meta.address),
        meta=meta,
        values=resolved,
    )
