import pytest

from localstore_lib.errors import (
    ErrorKind,
    QuotaExceededError,
    StoreResolutionError,
    PRIVATE_BROWSING_MESSAGE,
    RECORD_NOT_FOUND_MESSAGE,
)
from localstore_lib.storage import default_substrate
from localstore_lib.storage.collection_store import CollectionStore
from localstore_lib.storage.memory_backend import MemorySubstrate
from localstore_lib.sync import attach, classify_error, execute, local_sync, SyncOptions


class Record:
    id_attribute = "id"

    def __init__(self, store=None, id=None, **attrs):
        self.store = store
        self.id = id
        self.attrs = attrs

    def get_id(self):
        return self.id

    def to_json(self):
        return dict(self.attrs, id=self.id)

    def resolve_store(self):
        if self.store is None:
            raise StoreResolutionError("no store")
        return self.store


class Calls:
    def __init__(self):
        self.success = []
        self.error = []
        self.complete = []

    def options(self):
        return SyncOptions(
            success=self.success.append,
            error=self.error.append,
            complete=self.complete.append,
        )


class FailingStore(CollectionStore):
    def __init__(self, substrate, exc):
        super().__init__("todos", substrate)
        self.exc = exc

    def create(self, record):
        raise self.exc


@pytest.fixture
def store():
    return CollectionStore("todos", MemorySubstrate())


def test_create_calls_success_and_complete(store):
    calls = Calls()
    rec = Record(store, title="a")
    local_sync("create", rec, calls.options())

    assert calls.success == [{"title": "a", "id": rec.id}]
    assert calls.error == []
    assert calls.complete == [{"title": "a", "id": rec.id}]


def test_read_by_id_and_collection_read(store):
    store.create(Record(store, id="1", n=1))
    store.create(Record(store, id="2", n=2))

    calls = Calls()
    local_sync("read", Record(store, id="2"), calls.options())
    assert calls.success == [{"n": 2, "id": "2"}]

    calls = Calls()
    local_sync("read", Record(store), calls.options())
    assert calls.success == [[{"n": 1, "id": "1"}, {"n": 2, "id": "2"}]]


def test_read_missing_record_reports_not_found(store):
    calls = Calls()
    local_sync("read", Record(store, id="nope"), calls.options())
    assert calls.success == []
    assert calls.error == [RECORD_NOT_FOUND_MESSAGE]
    assert calls.complete == [None]


def test_update_and_delete(store):
    rec = Record(store, id="1", title="x")
    calls = Calls()
    local_sync("update", rec, calls.options())
    assert calls.success == [{"title": "x", "id": "1"}]

    calls = Calls()
    local_sync("delete", rec, calls.options())
    assert calls.success == [rec]
    assert store.find(rec) is None


def test_unknown_method_yields_no_result(store):
    calls = Calls()
    local_sync("patch", Record(store, id="1"), calls.options())
    assert calls.success == []
    assert calls.error == [RECORD_NOT_FOUND_MESSAGE]
    assert calls.complete == [None]


def test_quota_error_on_empty_substrate_means_private_mode():
    store = CollectionStore("todos", MemorySubstrate(quota=1))
    calls = Calls()
    local_sync("create", Record(store, title="x"), calls.options())
    assert calls.error == [PRIVATE_BROWSING_MESSAGE]
    assert calls.success == []
    assert calls.complete == [None]


def test_quota_error_on_used_substrate_passes_message_through():
    sub = MemorySubstrate(quota=40)
    sub.set("other", "x" * 30)
    store = CollectionStore("todos", sub)
    calls = Calls()
    local_sync("create", Record(store, title="x"), calls.options())
    assert len(calls.error) == 1
    assert calls.error[0] != PRIVATE_BROWSING_MESSAGE
    assert "quota" in calls.error[0]


def test_unexpected_exception_message_is_forwarded():
    store = FailingStore(MemorySubstrate(), RuntimeError("boom"))
    rec = Record(store, title="x")
    calls = Calls()
    local_sync("create", rec, calls.options())
    assert calls.error == ["boom"]


def test_exception_without_message_falls_back_to_not_found():
    store = FailingStore(MemorySubstrate(), RuntimeError())
    calls = Calls()
    local_sync("create", Record(store), calls.options())
    assert calls.error == [RECORD_NOT_FOUND_MESSAGE]


def test_missing_store_propagates():
    with pytest.raises(StoreResolutionError):
        local_sync("read", Record(None, id="1"), Calls().options())


def test_mapping_options_and_no_options(store):
    seen = []
    local_sync("create", Record(store, id="1"), {"success": seen.append})
    assert seen == [{"id": "1"}]
    # neither callbacks nor failures escape
    assert local_sync("read", Record(store, id="missing")) is None
    assert local_sync("read", Record(store, id="missing"), {"success": seen.append}) is None
    assert len(seen) == 1


def test_exactly_one_of_success_or_error(store):
    for method, rec in [("create", Record(store)), ("read", Record(store, id="none"))]:
        calls = Calls()
        local_sync(method, rec, calls.options())
        assert len(calls.success) + len(calls.error) == 1
        assert len(calls.complete) == 1


def test_classify_error_is_pure():
    sizes = []

    def size():
        sizes.append(True)
        return 0

    assert classify_error(ValueError("bad"), size) == (ErrorKind.GENERIC_STORAGE_ERROR, "bad")
    assert sizes == []
    assert classify_error(QuotaExceededError(), size) == (
        ErrorKind.QUOTA_EXCEEDED_PRIVATE_MODE,
        PRIVATE_BROWSING_MESSAGE,
    )
    assert classify_error(QuotaExceededError("full"), lambda: 3) == (ErrorKind.GENERIC_STORAGE_ERROR, "full")


def test_execute_reports_kinds(store):
    ok = execute(store, "create", Record(store, id="1"))
    assert ok.ok and ok.kind is None
    missing = execute(store, "read", Record(store, id="2"))
    assert not missing.ok
    assert missing.kind is ErrorKind.RECORD_NOT_FOUND
    assert missing.message == RECORD_NOT_FOUND_MESSAGE


def test_attach_installs_store_and_sync():
    class Thing:
        pass

    sub = MemorySubstrate()
    store = attach(Thing, "things", sub)
    assert Thing.local_storage is store
    assert store.name == "things"
    assert store.substrate is sub
    assert Thing.sync is local_sync

    class Other:
        pass

    assert attach(Other, "others").substrate is default_substrate()


def test_empty_collection_read_is_a_success(store):
    calls = Calls()
    local_sync("read", Record(store), calls.options())
    assert calls.success == [[]]
    assert calls.error == []
    assert calls.complete == [[]]
