"""Registry mutation helpers and the registry provider.

This module exposes:
- `add_event_spec(registry, spec)` → insert one spec (lowercases key)
- `add_many(registry, specs)` → insert multiple
- `EventRegistryProvider` → hands a fixed registry to the projector
"""

from __future__ import annotations

from collections.abc import Iterable

from pdpind.core.interfaces import IEventRegistryProvider
from pdpind.decoding.specs import EventRegistry, EventSpec


def add_event_spec(registry: EventRegistry, spec: EventSpec) -> None:
    """Insert one spec into the registry keyed by lowercased topic0."""
    registry[spec.topic0.lower()] = spec


def add_many(registry: EventRegistry, specs: Iterable[EventSpec]) -> None:
    """Insert many specs into the registry."""
    for s in specs:
        add_event_spec(registry, s)


class EventRegistryProvider(IEventRegistryProvider):
    """
    Registry provider that always returns the same EventRegistry.

    This is the bridge between the decoding registry (signatures/ABIs) and
    the projector, which only depends on the interface.
    """

    def __init__(self, registry: EventRegistry) -> None:
        self._registry = registry

    def get_registry(self) -> EventRegistry:
        return self._registry
