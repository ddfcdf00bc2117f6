"""Event projector: decode → update selection trees → persist entities.

Logs must be fed strictly in delivery order (block number, then log index).
Selection-tree updates are order-sensitive and cannot be repaired after the
fact, so with `strict_ordering` a log at or before the last processed
position raises `OutOfOrderEventError` instead of being applied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from pdpind.core.config import ProjectorConfig
from pdpind.core.interfaces import IEntityStore, IEventRegistryProvider
from pdpind.core.models import EventLog, Meta, hex_to_bytes
from pdpind.decoding.decoder import decode_event
from pdpind.decoding.registries import make_default_registry
from pdpind.decoding.specs import EventRegistry
from pdpind.indexing.sum_tree import SumTree
from pdpind.projection.handlers import HANDLERS, Handler, ProjectionContext

logger = logging.getLogger(__name__)


class OutOfOrderEventError(ValueError):
    """A log arrived at or before the position of the last processed log."""


@dataclass(kw_only=True)
class ProjectionStats:
    """Counters for one projector instance."""

    seen: int = 0
    projected: int = 0
    filtered: int = 0  # wrong emitter
    undecoded: int = 0  # unknown topic0 / truncated head
    unhandled: int = 0  # decoded but no handler


class EventProjector:
    """
    Consume logs one at a time and project them into entities.

    Parameters
    ----------
    store : IEntityStore
        Entity persistence shared with the selection tree.
    registry : EventRegistry | IEventRegistryProvider | None
        Decoding specs; defaults to the PDP verifier + warm storage events.
    config : ProjectorConfig | None
        Emitter filter, ordering policy and tree capacity.
    """

    def __init__(
        self,
        store: IEntityStore,
        registry: EventRegistry | IEventRegistryProvider | None = None,
        config: ProjectorConfig | None = None,
        *,
        handlers: dict[str, Handler] | None = None,
    ) -> None:
        self.config = config or ProjectorConfig()
        if registry is None:
            registry = make_default_registry()
        elif isinstance(registry, IEventRegistryProvider):
            registry = registry.get_registry()
        self.registry: EventRegistry = registry
        self.handlers = dict(HANDLERS if handlers is None else handlers)
        self.tree = SumTree(store, max_height=self.config.max_tree_height)
        self.ctx = ProjectionContext(store=store, tree=self.tree, config=self.config)
        self.stats = ProjectionStats()
        self._contracts = {c.lower() for c in self.config.contracts}
        self._last_position: tuple[int, int] | None = None

    @property
    def last_position(self) -> tuple[int, int] | None:
        return self._last_position

    def _check_order(self, log: EventLog) -> None:
        if self._last_position is None or log.position > self._last_position:
            return
        msg = f"log {log.position} delivered after {self._last_position}"
        if self.config.strict_ordering:
            raise OutOfOrderEventError(msg)
        logger.warning("%s; applying anyway", msg)

    def process(self, log: EventLog) -> bool:
        """Project one log. Returns True if a handler consumed it."""
        self._check_order(log)
        if self._last_position is None or log.position > self._last_position:
            self._last_position = log.position
        self.stats.seen += 1

        if self._contracts and log.address.lower() not in self._contracts:
            self.stats.filtered += 1
            return False

        data = hex_to_bytes(log.data_hex)
        if data is None:
            logger.warning("log %s-%d: malformed data hex, skipped", log.tx_hash, log.log_index)
            self.stats.undecoded += 1
            return False

        pe = decode_event(
            topics=log.topics,
            data=data,
            meta=Meta.from_log(log),
            registry=self.registry,
        )
        if pe is None:
            self.stats.undecoded += 1
            return False

        handler = self.handlers.get(pe.name)
        if handler is None:
            logger.debug("no handler for %s", pe.name)
            self.stats.unhandled += 1
            return False

        handler(self.ctx, pe, log)
        self.stats.projected += 1
        return True

    def process_many(self, logs: Iterable[EventLog]) -> int:
        """Project logs in the given order; returns how many were projected."""
        projected = 0
        for log in logs:
            if self.process(log):
                projected += 1
        logger.info(
            "projected %d logs (seen=%d filtered=%d undecoded=%d unhandled=%d)",
            projected, self.stats.seen, self.stats.filtered, self.stats.undecoded, self.stats.unhandled,
        )
        return projected
