# kvdb

`kvdb` is a small key/value storage layer. Code talks to one interface,
`kvdb.store.interface.KVStore`, and the backend is picked from a DSN string
such as `badger:///var/lib/app/state.db`.

What it provides:

- **A common store interface** with buffered writes (`put` / `flush_puts`),
  point reads (`get`, `batch_get`), range reads (`scan`, `prefix`,
  `batch_prefix`) and bulk deletion (`batch_delete`). Stores can be used as
  context managers; leaving the `with` block calls `close()`.
- **Streaming results** through `kvdb.store.iterator.Iterator`, which can be
  used in a plain `for` loop or driven with `next()` / `item()` / `err()`.
- **An embedded on-disk backend**, `kvdb.store.embedded.EmbeddedStore`, kept
  in a local LMDB database directory and registered under the `badger` and
  `badger3` schemes.
- **A driver registry** (`kvdb.store.registry`) that maps DSN schemes to
  store factories (`register`, `is_registered`, `by_name`, `new_store`).
- **Write batching** with size, operation-count and time thresholds
  (`kvdb.store.batchop.BatchOp`).
- **Optional zstd compression** of values (`kvdb.store.compression`).
- **Purgeable stores** (`kvdb.store.purgeable.PurgeableKVStore`), which
  remove keys once they are older than a given number of blocks.
- **Helpers** for block identifiers and hex encodings (`kvdb.utils`),
  DSN query options (`kvdb.store.dsnopts`) and decoding of wide-column rows
  (`kvdb.bigt`).

## Opening a store

Importing `kvdb.store.embedded` registers the `badger` and `badger3`
schemes; `register_drivers()` can be called again safely.

```python
from kvdb.store.embedded import register_drivers
from kvdb.store.registry import new_store
from kvdb.store.types import NotFoundError

register_drivers()
store = new_store("badger:///tmp/kvdb-example/state.db")

store.put(b"ba1", b"3")
store.put(b"ba2", b"4")
store.put(b"c", b"6")
store.flush_puts()

assert store.get(b"ba1") == b"3"

try:
    store.get(b"missing")
except NotFoundError:
    pass

store.close()
```

Writes are buffered until `flush_puts` is called, so flush before reading
back what you wrote; `close()` drops puts that were never flushed. Empty keys
are refused with `ValueError`. An unknown DSN scheme raises `ValueError`.

DSN query options of the embedded store:

- `compression=zstd` (or `zst`): values stored zstd-compressed are read back
  decompressed. New values are never compressed.
- `truncate=...`: accepted by `badger://` and ignored; `badger3://` refuses it
  with `ValueError`.

## Reading ranges

A limit of `0` means "no limit". Range calls return an iterator of
`KV` items, each with a `key` and a `value`.

```python
from kvdb.store.options import key_only

for kv in store.prefix(b"ba", 0):
    print(kv.key, kv.value)

# Keys in [b"b", b"c"), at most two of them
for kv in store.scan(b"b", b"c", 2):
    print(kv.key)

# Several prefixes in order, keys only, one limit shared by all prefixes
for kv in store.batch_prefix([b"ba", b"c"], 0, key_only()):
    print(kv.key)  # kv.value is None
```

A `scan` with an empty end key yields nothing. `batch_get` returns the values
in the same order as the keys it was given; a `for` loop over it raises
`NotFoundError` at the first key that does not exist.

## Purgeable stores

```python
from kvdb.store.purgeable import PurgeableKVStore

purgeable = PurgeableKVStore(b"\x09", store, ttl_in_blocks=1)
purgeable.mark_current_height(90)
purgeable.put(b"a", b"1")
purgeable.flush_puts()

purgeable.mark_current_height(92)
purgeable.purge_keys()  # removes keys written below height 91
```

Each `put` also writes a marker key made of the table prefix, the
big-endian 8-byte height and the original key. `put` raises `RuntimeError`
until a height has been marked.

## Compression

```python
from kvdb.store.compression import new_compressor

compressor = new_compressor("zstd", 25)
packed = compressor.compress(b"x" * 100)
assert compressor.decompress(packed) == b"x" * 100
```

Values no longer than the threshold are kept as they are. The modes `""`,
`none`, `false` and `no` give a compressor that changes nothing; any other
mode raises `ValueError`.

## Key helpers

```python
from kvdb.store.types import Key
from kvdb.utils import hex_uint16, increase_block_id_suffix

Key(b"rowkey1").prefix_next()   # Key(b"rowkey2")
hex_uint16(65534)               # "fffe"
increase_block_id_suffix("00000001deadbeef")  # "00000001deadbef0"
```

## What this package does not do

- The only storage backend is the embedded one. There are no drivers for
  networked or cloud key/value services; `kvdb.bigt` only parses
  `bigtable://project.instance/prefix` connection strings and decodes row
  cells that you already hold as `ReadItem` objects.
- There is no network server and no command-line program.
- `kvdb.store.testdriver` offers stub drivers registered under the `test`
  scheme; they can be opened and closed, but every data operation raises
  `RuntimeError`.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.