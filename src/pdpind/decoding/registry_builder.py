"""Build event specs and registries from Solidity event signatures.

A signature looks like the declaration in the contract source:

    "PiecesRemoved(uint256 indexed setId, uint256[] pieceIds)"

Indexed inputs become topic fields (topics 1..n), the rest become data head
slots in declaration order. Only flat types are accepted; none of the events
indexed here take tuples.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import NamedTuple, Optional

from eth_utils import keccak

from .specs import DataFieldSpec, EventRegistry, EventSpec, Projection, ProjectionRefs, TopicFieldSpec

_SIGNATURE = re.compile(r"^\s*(?P<name>[A-Za-z_]\w*)\s*\((?P<params>[^()]*)\)\s*$")
_PARAM = re.compile(r"^(?P<type>[a-z]\w*(?:\[\d*\])*)(?P<indexed>\s+indexed)?(?:\s+(?P<name>[A-Za-z_]\w*))?$")


class EventParam(NamedTuple):
    name: str
    type: str
    indexed: bool


def parse_signature(signature: str) -> tuple[str, list[EventParam]]:
    """Split a signature into the event name and its parameters.

    Unnamed parameters are called `arg{position}`.
    """
    m = _SIGNATURE.match(signature)
    if m is None:
        raise ValueError(f"Invalid event signature: {signature}")
    params: list[EventParam] = []
    raw_params = [p.strip() for p in m["params"].split(",")] if m["params"].strip() else []
    for i, raw in enumerate(raw_params):
        p = _PARAM.match(" ".join(raw.split()))
        if p is None:
            raise ValueError(f"Invalid parameter {raw!r} in event signature: {signature}")
        params.append(EventParam(p["name"] or f"arg{i}", p["type"], p["indexed"] is not None))
    return m["name"], params


def canonical_signature(name: str, params: Iterable[EventParam]) -> str:
    """`Name(type1,type2,...)`, the string hashed into topic0."""
    return f"{name}({','.join(p.type for p in params)})"


def event_spec_from_params(name: str, params: list[EventParam], projection: Optional[Projection] = None) -> EventSpec:
    """Build an EventSpec; by default every input is projected under its own name."""
    topic0 = "0x" + keccak(text=canonical_signature(name, params)).hex()

    indexed = [p for p in params if p.indexed]
    data = [p for p in params if not p.indexed]
    topic_fields = [TopicFieldSpec(p.name, i + 1, p.type) for i, p in enumerate(indexed)]
    data_fields = [DataFieldSpec(p.name, i, p.type) for i, p in enumerate(data)]

    if projection is None:
        projection = {
            **{p.name: ProjectionRefs.TopicRef(name=p.name) for p in indexed},
            **{p.name: ProjectionRefs.DataRef(name=p.name) for p in data},
        }

    return EventSpec(
        topic0=topic0,
        name=name,
        topic_fields=topic_fields,
        data_fields=data_fields,
        projection=projection,
    )


def event_spec_from_signature(signature: str, projection: Optional[Projection] = None) -> EventSpec:
    name, params = parse_signature(signature)
    return event_spec_from_params(name, params, projection)


def make_registry(signatures: str | Iterable[str]) -> EventRegistry:
    """Create a registry from one or multiple event signatures."""
    if isinstance(signatures, str):
        signatures = [signatures]
    reg: EventRegistry = {}
    for signature in signatures:
        spec = event_spec_from_signature(signature)
        reg[spec.topic0] = spec
    return reg
