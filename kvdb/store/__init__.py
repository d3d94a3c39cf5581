"""Store interface, iterators, batching, compression, registry and the embedded backend."""