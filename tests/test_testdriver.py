import pytest

from kvdb.store.registry import by_name, new_store
from kvdb.store.testdriver import (
    StubKVDBDriver,
    StubPurgeableKVDBDriver,
    new_stub_driver_factory,
    register_stub_driver,
)


def test_register_is_idempotent_and_opens_stub():
    register_stub_driver()
    register_stub_driver()
    reg = by_name("test")
    assert reg.title == "Test KVDB Driver"
    store = new_store("test://some-db")
    assert isinstance(store, StubKVDBDriver)
    assert store.dsn == "test://some-db"


def test_factory_keeps_dsn():
    assert new_stub_driver_factory("test://abc").dsn == "test://abc"


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.put(b"k", b"v"),
        lambda s: s.flush_puts(),
        lambda s: s.get(b"k"),
        lambda s: s.batch_get([b"k"]),
        lambda s: s.scan(b"a", b"b", 0),
        lambda s: s.prefix(b"a", 0),
        lambda s: s.batch_prefix([b"a"], 0),
        lambda s: s.batch_delete([b"k"]),
    ],
)
def test_data_operations_raise(call):
    with pytest.raises(RuntimeError, match="test driver, not callable"):
        call(StubKVDBDriver("test://x"))


def test_purgeable_stub_raises_on_purge_calls():
    stub = StubPurgeableKVDBDriver("test://p")
    assert stub.dsn == "test://p"
    with pytest.raises(RuntimeError, match="test purgeable driver, not callable"):
        stub.mark_current_height(1)
    with pytest.raises(RuntimeError, match="test purgeable driver, not callable"):
        stub.purge_keys()
    with pytest.raises(RuntimeError, match="test driver, not callable"):
        stub.get(b"k")