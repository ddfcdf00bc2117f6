"""Parquet export of projected entities.

One table per entity kind, written to `<out_root>/<kind>.parquet`.

Design notes
------------
- Integer fields are stored as strings: uint256 values (weights, rates,
  seeds) overflow every Arrow integer type and must stay exact.
- `bool` / `str` / `bytes` fields map to `bool` / `string` / `binary`.
- Rows are sorted by `id` so repeated exports of the same state are
  byte-for-byte reproducible.
"""

from __future__ import annotations

import logging
import os
from dataclasses import fields
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from pdpind.core.config import SnapshotConfig
from pdpind.core.entities import ENTITY_TYPES, E
from pdpind.core.interfaces import IEntityScanner

logger = logging.getLogger(__name__)

_ARROW_TYPES: dict[str, pa.DataType] = {
    "bool": pa.bool_(),
    "bytes": pa.binary(),
}


def _arrow_type(annotation: str) -> pa.DataType:
    # annotations are strings under `from __future__ import annotations`
    return _ARROW_TYPES.get(annotation, pa.string())


def _cell(value: object) -> object:
    if isinstance(value, bool) or isinstance(value, bytes) or value is None:
        return value
    return str(value)


def entities_to_table(cls: type[E], entities: list[E]) -> pa.Table:
    """Convert entities of one kind to an Arrow table with deterministic schema."""
    schema = pa.schema([pa.field(f.name, _arrow_type(str(f.type))) for f in fields(cls)])
    columns: dict[str, list[object]] = {f.name: [] for f in fields(cls)}
    for entity in sorted(entities, key=lambda e: e.id):
        for name, col in columns.items():
            col.append(_cell(getattr(entity, name)))
    return pa.Table.from_pydict(columns, schema=schema)


class SnapshotWriter:
    """Write every entity kind held by a scannable store as parquet files."""

    def __init__(self, config: SnapshotConfig | None = None) -> None:
        self.config = config or SnapshotConfig()
        self.out_root = Path(self.config.out_root)
        self.out_root.mkdir(parents=True, exist_ok=True)

    def path_for(self, cls: type) -> Path:
        return self.out_root / f"{cls.kind}.parquet"

    def write(self, store: IEntityScanner) -> list[Path]:
        """Write one parquet file per selected kind; returns written paths."""
        written: list[Path] = []
        for cls in ENTITY_TYPES:
            if self.config.kinds and cls.kind not in self.config.kinds:
                continue
            table = entities_to_table(cls, list(store.iter_kind(cls)))
            path = self.path_for(cls)
            tmp = path.with_suffix(".parquet.tmp")
            pq.write_table(table, tmp, compression=self.config.codec)
            os.replace(tmp, path)
            logger.info("wrote %d %s rows to %s", table.num_rows, cls.kind, path)
            written.append(path)
        return written
