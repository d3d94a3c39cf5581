"""Connection string parsing for wide-column table stores."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from urllib.parse import parse_qs, unquote, urlsplit

_DIGITS = re.compile(r"[0-9]+")
_MAX_UINT32 = 0xFFFFFFFF


@dataclass(frozen=True)
class DSN:
    project: str
    instance: str
    table_prefix: str
    create_tables: bool = False
    max_blocks_before_flush: int = 10
    max_duration_before_flush: timedelta = timedelta(seconds=10)


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _parse_uint32(text: str) -> int:
    if not _DIGITS.fullmatch(text):
        raise ValueError(f"strconv.ParseUint: parsing {_quote(text)}: invalid syntax")
    value = int(text)
    if value > _MAX_UINT32:
        raise ValueError(f"strconv.ParseUint: parsing {_quote(text)}: value out of range")
    return value


def _first(query: dict[str, list[str]], name: str) -> str:
    values = query.get(name)
    return values[0] if values else ""


def parse_dsn(dsn: str) -> DSN:
    """Parse ``bigtable://project.instance/tablePrefix?createTables=true``."""
    parts = urlsplit(dsn)
    host = parts.netloc.rpartition("@")[2]
    query = parse_qs(parts.query, keep_blank_values=True)

    host_parts = host.split(".")
    if len(host_parts) != 2:
        raise ValueError("dsn: invalid, ensure host component looks like 'project.instance'")

    max_seconds = 10
    raw_seconds = _first(query, "max-seconds-before-flush")
    if raw_seconds:
        try:
            max_seconds = _parse_uint32(raw_seconds)
        except ValueError as exc:
            raise ValueError(f"dsn: invalid parameter for max-blocks-before-flush, {exc}") from exc

    max_blocks = 10
    raw_blocks = _first(query, "max-blocks-before-flush")
    if raw_blocks:
        try:
            max_blocks = _parse_uint32(raw_blocks)
        except ValueError as exc:
            raise ValueError(f"dsn: invalid parameter for max-blocks-before-flush, {exc}") from exc

    create = _first(query, "createTables") or "false"
    if create not in ("true", "false"):
        raise ValueError("dsn: invalid parameter for createTables, use true or false")

    path = unquote(parts.path).strip("/")
    if len(path.split("/")) > 1:
        raise ValueError("dsn: path component invalid, should only have tablePrefix in there")
    if path == "":
        raise ValueError("dsn: invalid tablePrefix (in path segment), cannot be empty")

    return DSN(
        project=host_parts[0],
        instance=host_parts[1],
        table_prefix=path,
        create_tables=create == "true",
        max_blocks_before_flush=max_blocks,
        max_duration_before_flush=timedelta(seconds=max_seconds),
    )


@dataclass(frozen=True)
class ConnectionInfo:
    """Deprecated ``project:instance:prefix`` connection description; use DSN."""

    project: str
    instance: str
    table_prefix: str


def new_connection_info(connection: str) -> ConnectionInfo:
    """Split ``<project>:<instance>:<prefix>`` into its three parts."""
    parts = connection.split(":")
    if len(parts) != 3:
        raise ValueError("database connection info should be <project>:<instance>:<prefix>")
    return ConnectionInfo(project=parts[0], instance=parts[1], table_prefix=parts[2])