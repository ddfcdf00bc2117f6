from pdpind.core.entities import DataSet, Piece
from pdpind.core.interfaces import IEntityScanner, IEntityStore
from pdpind.storage.memory import MemoryEntityStore


def test_protocols() -> None:
    store = MemoryEntityStore()
    assert isinstance(store, IEntityStore)
    assert isinstance(store, IEntityScanner)


def test_load_is_detached_until_save() -> None:
    store = MemoryEntityStore()
    assert store.load(DataSet, "1") is None

    ds = store.new(DataSet, "1")
    ds.leaf_count = 10
    assert store.load(DataSet, "1") is None
    store.save(ds)

    loaded = store.load(DataSet, "1")
    assert loaded is not None
    loaded.leaf_count = 99
    assert store.load(DataSet, "1").leaf_count == 10


def test_kinds_are_separate_tables() -> None:
    store = MemoryEntityStore()
    store.save(DataSet(id="1"))
    store.save(Piece(id="1"))
    store.save(Piece(id="0"))
    assert store.count(DataSet) == 1
    assert [p.id for p in store.iter_kind(Piece)] == ["0", "1"]
