"""Hex, byte and block-number helpers shared by the key/value layers."""

from __future__ import annotations

import binascii
import re
from collections.abc import Iterable
from typing import Any

_MAX_UINT16 = 0xFFFF
_MAX_UINT32 = 0xFFFFFFFF
_MAX_UINT64 = 0xFFFFFFFFFFFFFFFF

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


class NotFoundError(LookupError):
    """Raised when a requested key does not exist."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0] if self.args else "not found"


def b(s: str) -> bytes:
    """Decode a hex string, raising ValueError when it is not valid hex."""
    try:
        return binascii.unhexlify(s)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise ValueError(f"invalid hex string {s!r}: {exc}") from exc


def h(data: bytes) -> str:
    """Encode bytes as a lower-case hex string."""
    return bytes(data).hex()


def must_proto_marshal(obj: Any) -> bytes:
    """Serialize a protobuf message, raising ValueError if that fails."""
    try:
        return obj.SerializeToString()
    except Exception as exc:
        raise ValueError(f"should be able to marshal proto: {exc}") from exc


def bool_to_byte(value: bool) -> int:
    """Return the byte value 1 for a true value and 0 otherwise."""
    return int(bool(value))


def uint64_to_bytes(value: int) -> bytes:
    return value.to_bytes(8, "big")


def string_list_to_bytes(value: Iterable[str], separator: str) -> bytes:
    return separator.join(value).encode()


def byte_to_bool(value: bytes) -> bool:
    return len(value) > 0 and value[0] != 0


def block_num(block_id: str) -> int:
    """Return the block number encoded in the first 8 hex digits, or 0."""
    if len(block_id) < 8:
        return 0
    try:
        raw = binascii.unhexlify(block_id[:8])
    except (binascii.Error, ValueError):
        return 0
    return int.from_bytes(raw, "big")


def increase_block_id_suffix(block_id: str) -> str:
    """Increment the last 8 hex digits of a block id.

    A suffix of "ffffffff" wraps around to "00000000", giving a lower key.
    """
    if len(block_id) < 8:
        raise ValueError(f"block id {block_id!r} is shorter than 8 characters")
    head, suffix = block_id[:-8], block_id[-8:]
    try:
        raw = binascii.unhexlify(suffix)
    except (binascii.Error, ValueError):
        return block_id
    last_bits = (int.from_bytes(raw, "big") + 1) & _MAX_UINT32
    return head + f"{last_bits:08x}"


def _parse_uint(text: str, bits: int) -> int:
    if not _HEX_DIGITS.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    value = int(text, 16)
    if value >= 1 << bits:
        raise ValueError(f"parsing {text!r}: value out of range")
    return value


def hex_rev_block_num(block_num: int) -> str:
    return hex_uint32(_MAX_UINT32 - block_num)


def hex_rev_block_num64(block_num: int) -> str:
    return hex_uint64(_MAX_UINT64 - block_num)


def from_rev_block_num64(text: str) -> int:
    return _MAX_UINT64 - _parse_uint(text, 64)


def hex_name(name: int) -> str:
    return f"{name:016x}"


def hex_uint16(value: int) -> str:
    return f"{value:04x}"


def from_hex_uint16(text: str) -> int:
    return _parse_uint(text, 16)


def hex_uint32(value: int) -> str:
    return f"{value:08x}"


def hex_uint64(value: int) -> str:
    return f"{value:016x}"


def from_hex_uint64(text: str) -> int:
    return _parse_uint(text, 64)


def reversed_block_id(block_id: str) -> str:
    return hex_rev_block_num(block_num(block_id)) + block_id[8:]


def reversed_uint16(value: int) -> int:
    return _MAX_UINT16 - value