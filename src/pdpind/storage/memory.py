from __future__ import annotations

import copy
from collections import defaultdict
from typing import Iterator

from pdpind.core.entities import E, Entity
from pdpind.core.interfaces import IEntityScanner, IEntityStore


class MemoryEntityStore(IEntityStore, IEntityScanner):
    """Dict-backed entity store.

    Records are copied on `load` and `save`, so callers see the same
    read-modify-write semantics as with a remote store: mutating a loaded
    entity has no effect until it is saved.
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, Entity]] = defaultdict(dict)

    def load(self, cls: type[E], key: str) -> E | None:
        found = self._tables[cls.kind].get(key)
        return None if found is None else copy.copy(found)  # type: ignore[return-value]

    def new(self, cls: type[E], key: str) -> E:
        return cls(id=key)

    def save(self, entity: Entity) -> None:
        self._tables[entity.kind][entity.id] = copy.copy(entity)

    def iter_kind(self, cls: type[E]) -> Iterator[E]:
        for key in sorted(self._tables[cls.kind]):
            yield copy.copy(self._tables[cls.kind][key])  # type: ignore[misc]

    def count(self, cls: type[E]) -> int:
        return len(self._tables[cls.kind])
