"""Event specification primitives and registry typing.

Defines lightweight dataclasses describing how a log is decoded:
- `TopicFieldSpec` / `DataFieldSpec`: typed sources for indexed topics / data head slots
- `EventSpec`: one event rule (topic0, fields, projection)
- `EventRegistry`: mapping from topic0 → EventSpec

Handlers never see raw field specs; they read `ParsedEvent.values`, whose
keys are the projection keys of the matching spec.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DYNAMIC_TYPES = ("string", "bytes")


# ---- Projection mapping ----
# Keys: names handed to handlers (e.g., "setId", "pieceIds")
# Values: where each value comes from
class ProjectionRefs:
    @dataclass(frozen=True, kw_only=True)
    class TopicRef:
        name: str

    @dataclass(frozen=True, kw_only=True)
    class DataRef:
        name: str

    @dataclass(frozen=True, kw_only=True)
    class Constant:
        value: Any


ProjectionRef = ProjectionRefs.TopicRef | ProjectionRefs.DataRef | ProjectionRefs.Constant

Projection = Mapping[str, ProjectionRef]


def resolve_projection_ref(
    ref: ProjectionRef,
    topic_vals: dict[str, Any],
    data_vals: dict[str, Any],
) -> Any:
    """Look up the parsed value a projection entry points at."""
    match ref:
        case ProjectionRefs.TopicRef(name=name):
            return topic_vals.get(name)
        case ProjectionRefs.DataRef(name=name):
            return data_vals.get(name)
        case ProjectionRefs.Constant(value=value):
            return value
    raise TypeError(f"unsupported projection ref {ref!r}")


@dataclass(frozen=True)
class TopicFieldSpec:
    """Describe one indexed topic field (position in `topics`, topic0 being 0, and ABI type)."""

    name: str
    index: int
    type: str  # e.g., "address", "uint256", "bytes32"


@dataclass(frozen=True)
class DataFieldSpec:
    """Describe one head slot of the data section (0-based word index).

    Dynamic types (`string`, `bytes`, `T[]`) hold an offset in their slot and
    are resolved through their tail.
    """

    name: str
    word_index: int
    type: str  # e.g., "address", "uint256", "bytes", "uint256[]"

    @property
    def dynamic(self) -> bool:
        return self.type in DYNAMIC_TYPES or self.type.endswith("[]")


@dataclass(frozen=True)
class EventSpec:
    """One event decoding rule + projection.

    Parameters
    ----------
    topic0 : str
        keccak256 of the canonical signature, 0x-prefixed.
    name : str
        Event name; handlers are looked up by it.
    topic_fields, data_fields : list
        Indexed and non-indexed inputs in declaration order.
    projection : Projection
        Output key → source. Every Topic/DataRef must name a declared field.
    """

    topic0: str
    name: str
    topic_fields: list[TopicFieldSpec]
    data_fields: list[DataFieldSpec]
    projection: Projection

    def __post_init__(self) -> None:
        topic_names = {tf.name for tf in self.topic_fields}
        data_names = {df.name for df in self.data_fields}
        for key, ref in self.projection.items():
            match ref:
                case ProjectionRefs.TopicRef(name=name) if name not in topic_names:
                    raise ValueError(f"{self.name}.{key}: no indexed field named {name!r}")
                case ProjectionRefs.DataRef(name=name) if name not in data_names:
                    raise ValueError(f"{self.name}.{key}: no data field named {name!r}")
                case ProjectionRefs.TopicRef() | ProjectionRefs.DataRef() | ProjectionRefs.Constant():
                    pass
                case _:
                    raise ValueError(f"{self.name}.{key}: {ref!r} is not a projection ref")

    @property
    def min_topics(self) -> int:
        """Topics a log must carry for every indexed field to be present."""
        return 1 + max((tf.index for tf in self.topic_fields), default=0)

    @property
    def static_words(self) -> int:
        """Minimum data length in words for the head to be present."""
        if not self.data_fields:
            return 0
        return max(df.word_index for df in self.data_fields) + 1


# The full registry keyed by topic0 (lowercased 0x-hex).
EventRegistry = dict[str, EventSpec]
