from localstore_lib.storage.index import CollectionIndex, parse_records
from localstore_lib.storage.memory_backend import MemorySubstrate


def test_parse_records():
    assert parse_records(None) == []
    assert parse_records("") == []
    assert parse_records("a,b,c") == ["a", "b", "c"]


def test_index_loads_existing_value():
    sub = MemorySubstrate()
    sub.set("todos", "x,y")
    idx = CollectionIndex("todos", sub)
    assert idx.records == ["x", "y"]
    assert "x" in idx
    assert len(idx) == 2


def test_add_is_unique_and_save_joins_with_commas():
    sub = MemorySubstrate()
    idx = CollectionIndex("todos", sub)
    assert idx.add("1") is True
    assert idx.add("2") is True
    assert idx.add("1") is False
    idx.save()
    assert sub.get("todos") == "1,2"


def test_discard_removes_every_occurrence():
    sub = MemorySubstrate()
    sub.set("todos", "1,2,1,3,1")
    idx = CollectionIndex("todos", sub)
    assert idx.discard("1") == 3
    assert idx.records == ["2", "3"]
    assert idx.discard("missing") == 0


def test_empty_index_saves_empty_string():
    sub = MemorySubstrate()
    idx = CollectionIndex("todos", sub)
    idx.save()
    assert sub.get("todos") == ""
