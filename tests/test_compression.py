import pytest
import zstandard

from kvdb.store.compression import (
    NoOpCompressor,
    ZstdCompressor,
    new_compressor,
)

LONG = b"this is a long byte sequence with more than 50 bytes to we can properly test compression"


def test_zstd_round_trip_above_threshold():
    compressor = ZstdCompressor(25)
    packed = compressor.compress(LONG)
    assert packed.startswith(b"\x28\xb5\x2f\xfd")
    assert compressor.decompress(packed) == LONG


def test_zstd_below_threshold_is_untouched():
    compressor = ZstdCompressor(25)
    assert compressor.compress(b"short") == b"short"
    assert compressor.decompress(b"short") == b"short"


def test_zstd_threshold_is_exclusive():
    data = b"x" * 10
    assert ZstdCompressor(len(data)).compress(data) == data


def test_zstd_corrupted_frame_raises():
    compressor = ZstdCompressor(0)
    with pytest.raises(zstandard.ZstdError):
        compressor.decompress(b"\x28\xb5\x2f\xfd" + b"\x00garbage")


def test_noop_compressor_is_identity():
    compressor = NoOpCompressor()
    assert compressor.compress(LONG) == LONG
    assert compressor.decompress(LONG) == LONG


@pytest.mark.parametrize("mode", ["zst", "zstd"])
def test_new_compressor_zstd_modes(mode):
    compressor = new_compressor(mode, 25)
    assert compressor.decompress(compressor.compress(LONG)) == LONG
    assert compressor.compress(LONG) != LONG


@pytest.mark.parametrize("mode", ["", "none", "false", "no"])
def test_new_compressor_noop_modes(mode):
    compressor = new_compressor(mode, 25)
    assert compressor.compress(LONG) == LONG


def test_new_compressor_invalid_mode():
    with pytest.raises(ValueError, match="invalid compression value"):
        new_compressor("gzip", 25)


def test_log_fields():
    assert NoOpCompressor().log_fields() == {"compression": "none"}
    assert ZstdCompressor(25).log_fields() == {
        "compression": "zstd",
        "compression_size_threshold": 25,
    }