"""Abstract interfaces implemented by every key/value store."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import Any

from kvdb.store.iterator import Iterator
from kvdb.store.options import ReadOption


class KVStore(abc.ABC):
    """A key/value store with buffered writes and streamed reads."""

    @abc.abstractmethod
    def put(self, key: bytes, value: bytes | None) -> None:
        """Queue a write; call flush_puts() to make sure it reaches the store."""

    @abc.abstractmethod
    def flush_puts(self) -> None:
        """Write every pending put."""

    @abc.abstractmethod
    def get(self, key: bytes) -> bytes | None:
        """Return the value of a key, raising NotFoundError when it is absent."""

    @abc.abstractmethod
    def batch_get(self, keys: Sequence[bytes]) -> Iterator:
        """Stream the values of keys, in the order of the keys.

        A missing key ends the stream with NotFoundError.
        """

    @abc.abstractmethod
    def scan(self, start: bytes, exclusive_end: bytes, limit: int, *args: ReadOption) -> Iterator:
        """Stream the entries with start <= key < exclusive_end."""

    @abc.abstractmethod
    def prefix(self, prefix: bytes, limit: int, *args: ReadOption) -> Iterator:
        """Stream the entries whose key starts with prefix."""

    @abc.abstractmethod
    def batch_prefix(self, prefixes: Sequence[bytes], limit: int, *args: ReadOption) -> Iterator:
        """Stream the entries of each prefix in turn, with a shared limit."""

    @abc.abstractmethod
    def batch_delete(self, keys: Sequence[bytes]) -> None:
        """Delete every given key."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the underlying engine; the store is unusable afterwards."""

    def __enter__(self) -> KVStore:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class Purgeable(abc.ABC):
    """A store whose entries expire after a number of blocks."""

    @abc.abstractmethod
    def mark_current_height(self, height: int) -> None:
        """Set the block height that subsequent puts belong to."""

    @abc.abstractmethod
    def purge_keys(self) -> None:
        """Delete every entry that is older than the time-to-live."""