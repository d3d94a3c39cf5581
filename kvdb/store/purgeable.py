"""A store wrapper that records write heights so old entries can be purged."""

from __future__ import annotations

from collections.abc import Sequence

from kvdb.store.interface import KVStore, Purgeable
from kvdb.store.iterator import Iterator
from kvdb.store.options import ReadOption
from kvdb.store.types import UNLIMITED

PURGEABLE_MAX_BATCH_SIZE = 500


class PurgeableKVStore(KVStore, Purgeable):
    """Wraps a store; every put also writes a deletion marker keyed by height.

    Markers live under table_prefix followed by the big-endian 8-byte height
    and the original key, so a range scan finds everything below a height.
    """

    def __init__(self, table_prefix: bytes, store: KVStore, ttl_in_blocks: int) -> None:
        self.table_prefix = bytes(table_prefix)
        self.store = store
        self.ttl_in_blocks = ttl_in_blocks
        self.height = 0
        self.height_set = False

    def put(self, key: bytes, value: bytes | None) -> None:
        if not self.height_set:
            raise RuntimeError("ephemeral kv store height not set")
        self.store.put(key, value)
        self.store.put(self.deletion_key(self.height, key), b"\x00")

    def flush_puts(self) -> None:
        self.store.flush_puts()

    def get(self, key: bytes) -> bytes | None:
        return self.store.get(key)

    def batch_get(self, keys: Sequence[bytes]) -> Iterator:
        return self.store.batch_get(keys)

    def scan(self, start: bytes, exclusive_end: bytes, limit: int, *args: ReadOption) -> Iterator:
        return self.store.scan(start, exclusive_end, limit, *args)

    def prefix(self, prefix: bytes, limit: int, *args: ReadOption) -> Iterator:
        return self.store.prefix(prefix, limit, *args)

    def batch_prefix(self, prefixes: Sequence[bytes], limit: int, *args: ReadOption) -> Iterator:
        return self.store.batch_prefix(prefixes, limit, *args)

    def batch_delete(self, keys: Sequence[bytes]) -> None:
        self.store.batch_delete(keys)

    def close(self) -> None:
        self.store.close()

    def mark_current_height(self, height: int) -> None:
        self.height = height
        self.height_set = True

    def purge_keys(self) -> None:
        """Delete entries written below height - ttl_in_blocks, with their markers."""
        if self.height < self.ttl_in_blocks:
            return
        high_block_num = self.height - self.ttl_in_blocks
        start_key = self.deletion_key(0, b"")
        end_key = self.deletion_key(high_block_num, b"")

        pending: list[bytes] = []
        for kv in self.scan(start_key, end_key, UNLIMITED):
            if len(pending) >= PURGEABLE_MAX_BATCH_SIZE:
                self._delete(pending)
                pending = []
            pending.append(kv.key)
            pending.append(self.original_key(kv.key))
        self._delete(pending)

    def _delete(self, keys: list[bytes]) -> None:
        try:
            self.store.batch_delete(keys)
        except Exception as exc:
            raise RuntimeError(f"unable to delete batch: {exc}") from exc

    def deletion_key(self, height: int, key: bytes) -> bytes:
        return self.table_prefix + height.to_bytes(8, "big") + bytes(key)

    def original_key(self, deletion_key: bytes) -> bytes:
        return bytes(deletion_key[len(self.table_prefix) + 8 :])