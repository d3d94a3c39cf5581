"""On-disk key/value stores backed by an embedded LMDB environment."""

from __future__ import annotations

import logging
import os
import sys
import threading
from collections.abc import Callable, Generator, Sequence

import lmdb

from kvdb.store.badger_dsn import parse_badger_dsn
from kvdb.store.compression import Compressor, new_compressor
from kvdb.store.interface import KVStore
from kvdb.store.iterator import Iterator
from kvdb.store.options import ReadOption, new_read_options
from kvdb.store.registry import Registration, is_registered, register
from kvdb.store.types import KV, Key, Limit, NotFoundError

_log = logging.getLogger(__name__)

_INITIAL_MAP_SIZE = 1 << 30
_JOIN_TIMEOUT_SECONDS = 5.0

_Work = Callable[["lmdb.Transaction", Iterator], None]


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _key_only(options: tuple[ReadOption, ...]) -> bool:
    read_options = new_read_options(*options)
    return read_options is not None and read_options.key_only


class EmbeddedStore(KVStore):
    """A store kept in a local database directory.

    Puts are buffered until flush_puts(); reads stream their results from a
    background thread through an Iterator.
    """

    def __init__(self, dsn: str, env: lmdb.Environment, compressor: Compressor) -> None:
        self.dsn = dsn
        self._env = env
        self._compressor = compressor
        self._max_key_size = env.max_key_size()
        self._pending: dict[bytes, bytes] = {}
        self._closing = threading.Event()
        self._workers: set[threading.Thread] = set()
        self._workers_lock = threading.Lock()
        self._closed = False

    def __str__(self) -> str:
        return f"badger kv store with dsn: {_quote(self.dsn)}"

    def enable_empty(self) -> None:
        _log.info("discarding possible empty value on store implementation, not required for this store")

    # Writes

    def _check_key(self, key: bytes, action: str) -> None:
        if not key:
            raise ValueError(f"{action}: key cannot be empty")
        if len(key) > self._max_key_size:
            raise ValueError(
                f"{action}: key of {len(key)} bytes exceeds the limit of {self._max_key_size} bytes"
            )

    def _write(self, action: Callable[[lmdb.Transaction], None]) -> None:
        while True:
            try:
                with self._env.begin(write=True) as txn:
                    action(txn)
                return
            except lmdb.MapFullError:
                _log.debug("database map full, growing it")
                self._env.set_mapsize(self._env.info()["map_size"] * 2)

    def put(self, key: bytes, value: bytes | None) -> None:
        key = bytes(key)
        self._check_key(key, "set entry")
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug("putting key in store key=%s", Key(key))
        self._pending[key] = self._compressor.compress(bytes(value or b""))

    def flush_puts(self) -> None:
        if not self._pending:
            return
        entries = list(self._pending.items())

        def write_all(txn: lmdb.Transaction) -> None:
            for key, value in entries:
                txn.put(key, value)

        self._write(write_all)
        self._pending.clear()

    def batch_delete(self, keys: Sequence[bytes]) -> None:
        _log.debug("batch deletion key_count=%d", len(keys))
        deletion_keys = [bytes(key) for key in keys]
        for key in deletion_keys:
            self._check_key(key, "delete")

        def delete_all(txn: lmdb.Transaction) -> None:
            for key in deletion_keys:
                txn.delete(key)

        self._write(delete_all)

    # Reads

    def _lookup(self, txn: lmdb.Transaction, key: bytes) -> bytes | None:
        if not key:
            raise ValueError("key cannot be empty")
        if len(key) > self._max_key_size:
            return None
        return txn.get(key)

    def _value(self, raw: bytes, key_only: bool) -> bytes | None:
        if key_only:
            return None
        return self._compressor.decompress(raw)

    def get(self, key: bytes) -> bytes | None:
        key = bytes(key)
        with self._env.begin() as txn:
            raw = self._lookup(txn, key)
        if raw is None:
            raise NotFoundError()
        return self._compressor.decompress(raw)

    @staticmethod
    def _cursor_from(txn: lmdb.Transaction, start: bytes) -> Generator[tuple[bytes, bytes], None, None]:
        cursor = txn.cursor()
        found = cursor.set_range(start) if start else cursor.first()
        if not found:
            return
        yield from cursor.iternext(keys=True, values=True)

    def _stream(self, work: _Work) -> Iterator:
        it = Iterator(self._closing)

        def run() -> None:
            try:
                with self._env.begin() as txn:
                    work(txn, it)
            except Exception as exc:  # the error is handed to the consumer
                it.push_error(exc)
            else:
                it.push_finished()
            finally:
                with self._workers_lock:
                    self._workers.discard(threading.current_thread())

        thread = threading.Thread(target=run, name="kvdb-embedded-reader", daemon=True)
        with self._workers_lock:
            self._workers.add(thread)
        thread.start()
        return it

    def batch_get(self, keys: Sequence[bytes]) -> Iterator:
        wanted = [bytes(key) for key in keys]

        def work(txn: lmdb.Transaction, it: Iterator) -> None:
            for key in wanted:
                raw = self._lookup(txn, key)
                if raw is None:
                    raise NotFoundError()
                if not it.push_item(KV(key, self._compressor.decompress(raw))):
                    return

        return self._stream(work)

    def scan(self, start: bytes, exclusive_end: bytes, limit: int, *args: ReadOption) -> Iterator:
        start_key = bytes(start or b"")
        end_key = bytes(exclusive_end or b"")
        bound = Limit(limit)
        key_only = _key_only(args)
        _log.debug("scanning start=%s exclusive_end=%s limit=%s", Key(start_key), Key(end_key), bound)

        def work(txn: lmdb.Transaction, it: Iterator) -> None:
            if not end_key:
                return
            count = 0
            for key, raw in self._cursor_from(txn, start_key):
                if key >= end_key:
                    return
                count += 1
                if not it.push_item(KV(key, self._value(raw, key_only))):
                    return
                if bound.reached(count):
                    return

        return self._stream(work)

    def prefix(self, prefix: bytes, limit: int, *args: ReadOption) -> Iterator:
        wanted = bytes(prefix or b"")
        bound = Limit(limit)
        key_only = _key_only(args)
        _log.debug("prefix scanning prefix=%s limit=%s", Key(wanted), bound)

        def work(txn: lmdb.Transaction, it: Iterator) -> None:
            count = 0
            for key, raw in self._cursor_from(txn, wanted):
                if not key.startswith(wanted):
                    return
                count += 1
                if not it.push_item(KV(key, self._value(raw, key_only))):
                    return
                if bound.reached(count):
                    return

        return self._stream(work)

    def batch_prefix(self, prefixes: Sequence[bytes], limit: int, *args: ReadOption) -> Iterator:
        wanted = [bytes(p or b"") for p in prefixes]
        bound = Limit(limit)
        key_only = _key_only(args)
        _log.debug("batch prefix scanning prefix_count=%d limit=%s", len(wanted), bound)

        def work(txn: lmdb.Transaction, it: Iterator) -> None:
            count = 0
            for current in wanted:
                for key, raw in self._cursor_from(txn, current):
                    if not key.startswith(current):
                        break
                    count += 1
                    if not it.push_item(KV(key, self._value(raw, key_only))):
                        return
                    if bound.reached(count):
                        return

        return self._stream(work)

    def close(self) -> None:
        """Stop running readers and close the database; pending puts are dropped."""
        if self._closed:
            return
        self._closed = True
        self._closing.set()
        with self._workers_lock:
            workers = list(self._workers)
        for worker in workers:
            worker.join(_JOIN_TIMEOUT_SECONDS)
        self._env.close()


def _open(dsn_string: str, version3: bool) -> EmbeddedStore:
    try:
        dsn = parse_badger_dsn(dsn_string)
    except ValueError as exc:
        raise ValueError(f"badger new: dsn: {exc}") from exc

    create_path = os.path.dirname(dsn.db_path) or "."
    try:
        os.makedirs(create_path, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise OSError(f"creating path {_quote(create_path)}: {exc}") from exc

    compression = dsn.param("compression")
    if compression in ("zst", "zstd"):
        _log.info("using zstd compression on badger database path=%s", dsn.db_path)

    truncate = dsn.param("truncate")
    if version3:
        if truncate != "":
            raise ValueError("badgerV3 does not support truncate")
    elif truncate in ("true", "yes", "false", "no"):
        _log.info("using 'truncate=%s' on badger database path=%s", truncate, dsn.db_path)

    # Only used to read values written compressed by older versions: the
    # threshold can never be exceeded, so nothing new gets compressed.
    compressor = new_compressor(compression, sys.maxsize)

    try:
        env = lmdb.open(dsn.db_path, map_size=_INITIAL_MAP_SIZE, subdir=True)
    except lmdb.Error as exc:
        raise OSError(f"badger new: open badger db: {exc}") from exc

    return EmbeddedStore(dsn_string, env, compressor)


def new_store(dsn_string: str) -> EmbeddedStore:
    """Open the store described by ``badger://path?compression=...&truncate=...``."""
    return _open(dsn_string, version3=False)


def new_store_v3(dsn_string: str) -> EmbeddedStore:
    """Open the store described by ``badger3://path``; truncate is refused."""
    return _open(dsn_string, version3=True)


def register_drivers() -> None:
    """Register the "badger" and "badger3" schemes, once."""
    if not is_registered("badger"):
        register(Registration(name="badger", title="Badger", factory_func=new_store))
    if not is_registered("badger3"):
        register(Registration(name="badger3", title="Badger V3", factory_func=new_store_v3))


register_drivers()