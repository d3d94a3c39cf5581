"""Stub drivers that can be registered and opened but not used for data."""

from __future__ import annotations

from collections.abc import Sequence

from kvdb.store.interface import KVStore, Purgeable
from kvdb.store.iterator import Iterator
from kvdb.store.options import ReadOption
from kvdb.store.registry import Registration, is_registered, register

STUB_DRIVER_NAME = "test"

_NOT_CALLABLE = "test driver, not callable"
_PURGEABLE_NOT_CALLABLE = "test purgeable driver, not callable"


class StubKVDBDriver(KVStore):
    """A driver that records its DSN; every data operation raises."""

    def __init__(self, dsn: str) -> None:
        self.dsn = dsn

    def put(self, key: bytes, value: bytes | None) -> None:
        raise RuntimeError(_NOT_CALLABLE)

    def flush_puts(self) -> None:
        raise RuntimeError(_NOT_CALLABLE)

    def get(self, key: bytes) -> bytes | None:
        raise RuntimeError(_NOT_CALLABLE)

    def batch_get(self, keys: Sequence[bytes]) -> Iterator:
        raise RuntimeError(_NOT_CALLABLE)

    def scan(self, start: bytes, exclusive_end: bytes, limit: int, *args: ReadOption) -> Iterator:
        raise RuntimeError(_NOT_CALLABLE)

    def prefix(self, prefix: bytes, limit: int, *args: ReadOption) -> Iterator:
        raise RuntimeError(_NOT_CALLABLE)

    def batch_prefix(self, prefixes: Sequence[bytes], limit: int, *args: ReadOption) -> Iterator:
        raise RuntimeError(_NOT_CALLABLE)

    def batch_delete(self, keys: Sequence[bytes]) -> None:
        raise RuntimeError(_NOT_CALLABLE)

    def close(self) -> None:
        return None


class StubPurgeableKVDBDriver(StubKVDBDriver, Purgeable):
    """A stub driver that also claims to be purgeable."""

    def mark_current_height(self, height: int) -> None:
        raise RuntimeError(_PURGEABLE_NOT_CALLABLE)

    def purge_keys(self) -> None:
        raise RuntimeError(_PURGEABLE_NOT_CALLABLE)


def new_stub_driver_factory(dsn: str) -> KVStore:
    return StubKVDBDriver(dsn)


def register_stub_driver() -> None:
    """Register the stub driver under the "test" scheme, once."""
    if not is_registered(STUB_DRIVER_NAME):
        register(
            Registration(
                name=STUB_DRIVER_NAME,
                title="Test KVDB Driver",
                factory_func=new_stub_driver_factory,
            )
        )