"""DSN query option helpers."""

from __future__ import annotations

import re
from collections.abc import Iterable
from fractions import Fraction
from urllib.parse import SplitResult, parse_qsl, urlencode, urlsplit, urlunsplit

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_DURATION_COMPONENT = re.compile(r"([0-9]*)(?:\.([0-9]*))?(ns|us|µs|μs|ms|h|m|s)")
_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_MAX_DURATION_NS = (1 << 63) - 1


def _without_options(parts: SplitResult, keys: Iterable[str]) -> SplitResult:
    pairs = parse_qsl(parts.query, keep_blank_values=True)
    if not pairs:
        return parts
    removed = set(keys)
    grouped: dict[str, list[str]] = {}
    for key, value in pairs:
        if key not in removed:
            grouped.setdefault(key, []).append(value)
    query = urlencode([(key, value) for key in sorted(grouped) for value in grouped[key]])
    return parts._replace(query=query)


def remove_dsn_options(dsn: str, *args: str) -> str:
    """Return the DSN without the named query options; remaining ones are sorted by key."""
    return urlunsplit(_without_options(urlsplit(dsn), args))


def remove_dsn_options_from_url(dsn_url: SplitResult, *args: str) -> SplitResult:
    """Return a copy of the split URL without the named query options."""
    return _without_options(dsn_url, args)


def parse_duration(text: str) -> float:
    """Parse a duration such as "1h30m" or "250ms" into seconds."""
    rest = text
    sign = 1
    if rest and rest[0] in "+-":
        sign = -1 if rest[0] == "-" else 1
        rest = rest[1:]
    if rest == "0":
        return 0.0
    if not rest:
        raise ValueError(f"time: invalid duration {text!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(rest):
        match = _DURATION_COMPONENT.match(rest, pos)
        if match is None or (not match.group(1) and not match.group(2)):
            raise ValueError(f"time: invalid duration {text!r}")
        whole = int(match.group(1) or "0")
        frac_digits = match.group(2) or ""
        value = Fraction(whole)
        if frac_digits:
            value += Fraction(int(frac_digits), 10 ** len(frac_digits))
        total += value * _DURATION_UNITS[match.group(3)]
        pos = match.end()

    ns = int(total)
    if ns > _MAX_DURATION_NS:
        raise ValueError(f"time: invalid duration {text!r}")
    return sign * ns / 1_000_000_000


class DSNQuery(dict):
    """Parsed DSN query values: each name maps to its list of values."""

    def _raw(self, name: str) -> str:
        values = self.get(name)
        return values[0] if values else ""

    def string_option(self, name: str, default_value: str) -> tuple[str, str]:
        raw = self._raw(name)
        return (raw or default_value, raw)

    def int_option(self, name: str, default_value: int) -> tuple[int, str]:
        raw = self._raw(name)
        if raw == "":
            return default_value, raw
        if not _INT_PATTERN.fullmatch(raw):
            raise ValueError(f"parsing {raw!r}: invalid syntax")
        return int(raw), raw

    def duration_option(self, name: str, default_value: float) -> tuple[float, str]:
        raw = self._raw(name)
        if raw == "":
            return default_value, raw
        return parse_duration(raw), raw