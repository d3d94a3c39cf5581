"""Core key/value types shared by every store."""

from __future__ import annotations

from dataclasses import dataclass

UNLIMITED = 0


class NotFoundError(LookupError):
    """Raised when a key is absent from a store."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0] if self.args else "not found"


@dataclass
class KV:
    key: bytes
    value: bytes | None = None

    def size(self) -> int:
        return len(self.key) + len(self.value or b"")


class Key(bytes):
    """A store key, printed as hex."""

    def __str__(self) -> str:
        return self.hex()

    def next(self) -> Key:
        """Return the next key in byte order (the key followed by 0x00)."""
        return Key(bytes(self) + b"\x00")

    def prefix_next(self) -> Key:
        """Return the smallest key greater than every key starting with this one."""
        buf = bytearray(self)
        for index in range(len(buf) - 1, -1, -1):
            buf[index] = (buf[index] + 1) & 0xFF
            if buf[index] != 0:
                return Key(bytes(buf))
        return Key(bytes(self) + b"\x00")


class Limit(int):
    """A result count limit; zero or less means unlimited."""

    def reached(self, count: int) -> bool:
        return self.bounded() and count >= int(self)

    def bounded(self) -> bool:
        return int(self) > 0

    def unbounded(self) -> bool:
        return int(self) <= 0

    def __str__(self) -> str:
        if self.unbounded():
            return "unlimited"
        return int.__repr__(self)