"""DSN parsing for the embedded on-disk stores."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import parse_qs, unquote, urlsplit

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class BadgerDSN:
    """Database path and query parameters (None when there are none)."""

    db_path: str
    params: dict[str, list[str]] | None = None

    def param(self, name: str) -> str:
        """Return the first value of a parameter, or an empty string."""
        if not self.params:
            return ""
        values = self.params.get(name)
        return values[0] if values else ""


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _hostname(host: str) -> str:
    if host.startswith("["):
        end = host.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in host {_quote(host)}")
        port = host[end + 1 :]
        if port and not re.fullmatch(r":[0-9]*", port):
            raise ValueError(f"invalid port {_quote(port)} after host")
        return host[1:end]
    colon = host.rfind(":")
    if colon >= 0:
        port = host[colon:]
        if not re.fullmatch(r":[0-9]*", port):
            raise ValueError(f"invalid port {_quote(port)} after host")
        return host[:colon]
    return host


def parse_badger_dsn(dsn_string: str) -> BadgerDSN:
    """Parse ``badger://relative/path`` or ``badger:///absolute/path?opt=value``."""
    try:
        parts = urlsplit(dsn_string)
        host = parts.netloc.rpartition("@")[2]
        hostname = unquote(_hostname(host))
        if _BAD_ESCAPE.search(parts.path) or _BAD_ESCAPE.search(host):
            raise ValueError("invalid URL escape")
    except ValueError as exc:
        raise ValueError(f"cannot parse badger dsn {_quote(dsn_string)}: {exc}") from exc

    segments = []
    if hostname:
        segments.append(hostname)
    path = unquote(parts.path)
    if path:
        segments.append(path)

    params = parse_qs(parts.query, keep_blank_values=True) or None
    return BadgerDSN(db_path="/".join(segments), params=params)