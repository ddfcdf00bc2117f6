from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Protocol, runtime_checkable

from pdpind.core.entities import E, Entity

if TYPE_CHECKING:
    from pdpind.decoding.specs import EventRegistry


# ---------------------------------------------------------------------------
# IEntityStore
# ---------------------------------------------------------------------------

@runtime_checkable
class IEntityStore(Protocol):
    """
    Keyed entity persistence used by the projector and the selection tree.

    Domain expectations:
    - Entities are addressed by (entity type, string id).
    - `load` returns a detached record: changes are only visible after `save`.
    - `save` is durable on return; there are no multi-entity transactions.
    """

    def load(self, cls: type[E], key: str) -> E | None:
        """Return the stored entity, or None if the key was never saved."""
        ...

    def new(self, cls: type[E], key: str) -> E:
        """Return a fresh, unsaved entity with default field values."""
        ...

    def save(self, entity: Entity) -> None:
        """Insert or replace `entity` under its id."""
        ...


@runtime_checkable
class IEntityScanner(Protocol):
    """Optional capability of stores that can enumerate their contents (exports, tests)."""

    def iter_kind(self, cls: type[E]) -> Iterator[E]:
        ...


# ---------------------------------------------------------------------------
# IEventRegistryProvider
# ---------------------------------------------------------------------------

@runtime_checkable
class IEventRegistryProvider(Protocol):
    """
    Abstract provider of EventRegistry objects used for decoding events.

    How the registry is built (signatures, ABI files, ...) is an
    infrastructure concern.
    """

    def get_registry(self) -> EventRegistry:
        """Return a fully configured EventRegistry instance."""
        ...
