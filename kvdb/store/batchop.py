"""Accumulates write operations and decides when to flush them."""

from __future__ import annotations

import time
from typing import Any

from kvdb.store.types import KV


def _format_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    digits = len(str(unit)) - 1
    frac_text = f"{frac:0{digits}d}".rstrip("0") if digits else ""
    return f"{whole}.{frac_text}" if frac_text else str(whole)


def _format_duration(seconds: float) -> str:
    ns = round(seconds * 1_000_000_000)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_format_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_format_fraction(ns, 1_000_000)}ms"
    hours, rest = divmod(ns, 3600 * 1_000_000_000)
    minutes, rest = divmod(rest, 60 * 1_000_000_000)
    secs = _format_fraction(rest, 1_000_000_000)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


class BatchOp:
    """A batch of key/value operations with size, count and age limits.

    A threshold of zero or less disables that limit; time_threshold is in
    seconds.
    """

    def __init__(self, size_threshold: int, puts_threshold: int, time_threshold: float) -> None:
        self.size_threshold = size_threshold
        self.puts_threshold = puts_threshold
        self.time_threshold = time_threshold
        self.batch: list[KV] = []
        self.size = 0
        self.puts = 0
        self.largest_entry: KV | None = None
        self._last_reset = time.monotonic()

    def op(self, key: bytes, value: bytes | None) -> None:
        entry = KV(key, value)
        self.size += entry.size()
        self.puts += 1
        self.batch.append(entry)
        largest = self.largest_entry.size() if self.largest_entry is not None else 0
        if largest < entry.size():
            self.largest_entry = entry

    def should_flush(self) -> bool:
        if not self.batch:
            return False
        return self._should_flush(self.size, self.puts)

    def would_flush_next(self, key: bytes, value: bytes | None) -> bool:
        """Tell whether adding this entry would make the batch due for a flush."""
        return self._should_flush(self.size + len(key) + len(value or b""), self.puts + 1)

    def _should_flush(self, size: int, op_count: int) -> bool:
        if self.size_threshold > 0 and size > self.size_threshold:
            return True
        if self.puts_threshold > 0 and op_count >= self.puts_threshold:
            return True
        if self.time_threshold != 0 and time.monotonic() - self._last_reset > self.time_threshold:
            return True
        return False

    def reset(self) -> None:
        self.batch = []
        self.size = 0
        self.puts = 0
        self.largest_entry = None
        self._last_reset = time.monotonic()

    def log_fields(self) -> dict[str, Any]:
        size_limit = str(self.size_threshold) if self.size_threshold > 0 else "None"
        ops_limit = str(self.puts_threshold) if self.puts_threshold > 0 else "None"
        time_limit = _format_duration(self.time_threshold) if self.time_threshold > 0 else "None"
        elapsed = _format_duration(time.monotonic() - self._last_reset)

        fields: dict[str, Any] = {
            "size": f"{self.size} (limit {size_limit})",
            "ops": f"{self.puts} (limit {ops_limit})",
            "time": f"{elapsed} (limit {time_limit})",
        }
        if self.largest_entry is not None:
            entry = self.largest_entry
            fields["largest_entry"] = (
                f"{entry.key.hex()} (key {len(entry.key)} bytes, "
                f"value {len(entry.value or b'')} bytes)"
            )
        return fields