"""Build event registries from contract ABI JSON (list of ABI entries or a file path).

Useful when a deployment ships its ABI next to the addresses: the registry
then follows the deployed contract instead of the signatures hard-coded in
`pdpind.decoding.registries`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Literal

from eth_utils.abi import event_signature_to_log_topic
from pydantic import BaseModel

from pdpind.decoding.registry import add_many
from pdpind.decoding.registry_builder import EventParam, canonical_signature, event_spec_from_params
from pdpind.decoding.specs import EventRegistry, EventSpec

logger = logging.getLogger(__name__)


class AbiInput(BaseModel):
    name: str = ""
    type: str
    indexed: bool = False
    internalType: str | None = None


class AbiEvent(BaseModel):
    type: Literal["event"]
    name: str
    inputs: list[AbiInput] = []
    anonymous: bool = False

    def params(self) -> list[EventParam]:
        return [EventParam(i.name or f"arg{pos}", i.type, i.indexed) for pos, i in enumerate(self.inputs)]


def get_event_signature(event: AbiEvent) -> str:
    return canonical_signature(event.name, event.params())


def get_event_topic0(event: AbiEvent) -> str:
    return "0x" + event_signature_to_log_topic(get_event_signature(event)).hex()


def get_event_spec(event: AbiEvent) -> EventSpec:
    return event_spec_from_params(event.name, event.params())


AbiJson = Iterable[dict[str, Any]]
AbiSpec = AbiJson | Path | str


def _load_abi(abi: AbiSpec) -> AbiJson:
    if isinstance(abi, (Path, str)):
        return json.loads(Path(abi).read_text())
    return abi


def get_events_from_abi(abi: AbiSpec) -> dict[str, AbiEvent]:
    """Named, non-anonymous events of an ABI keyed by event name."""
    events: dict[str, AbiEvent] = {}
    for entry in _load_abi(abi):
        if entry.get("type") != "event":
            continue
        event = AbiEvent.model_validate(entry)
        if event.anonymous:
            logger.debug("skipping anonymous event %s (no topic0)", event.name)
            continue
        events[event.name] = event
    return events


def make_event_registry_from_events(events: Iterable[AbiEvent]) -> EventRegistry:
    reg: EventRegistry = {}
    add_many(reg, (get_event_spec(event) for event in events))
    return reg


def make_event_registry_from_abi(abi: AbiSpec) -> EventRegistry:
    return make_event_registry_from_events(get_events_from_abi(abi).values())
