"""Value compressors used by the stores."""

from __future__ import annotations

import abc
from typing import Any

import zstandard

ZSTD_MAGIC_BYTES = b"\x28\xb5\x2f\xfd"


class Compressor(abc.ABC):
    """Compresses values before writing and restores them after reading."""

    @abc.abstractmethod
    def compress(self, data: bytes) -> bytes: ...

    @abc.abstractmethod
    def decompress(self, data: bytes) -> bytes: ...

    @abc.abstractmethod
    def log_fields(self) -> dict[str, Any]: ...


class NoOpCompressor(Compressor):
    def compress(self, data: bytes) -> bytes:
        return data

    def decompress(self, data: bytes) -> bytes:
        return data

    def log_fields(self) -> dict[str, Any]:
        return {"compression": "none"}


class ZstdCompressor(Compressor):
    """Zstandard compression for values larger than the threshold.

    Decompression only touches values that start with the zstd frame magic.
    """

    def __init__(self, threshold_in_bytes: int) -> None:
        self.threshold_in_bytes = threshold_in_bytes
        self._encoder = zstandard.ZstdCompressor()
        self._decoder = zstandard.ZstdDecompressor()

    def compress(self, data: bytes) -> bytes:
        if len(data) > self.threshold_in_bytes:
            return self._encoder.compress(data)
        return data

    def decompress(self, data: bytes) -> bytes:
        if bytes(data).startswith(ZSTD_MAGIC_BYTES):
            return self._decoder.decompressobj().decompress(data)
        return data

    def log_fields(self) -> dict[str, Any]:
        return {"compression": "zstd", "compression_size_threshold": self.threshold_in_bytes}


def new_compressor(mode: str, threshold_in_bytes: int) -> Compressor:
    if mode in ("zst", "zstd"):
        return ZstdCompressor(threshold_in_bytes)
    if mode in ("", "none", "false", "no"):
        return NoOpCompressor()
    raise ValueError("invalid compression value, use '' or zstd (for legacy support) or 'none'")