"""Typed readers for cells of a wide-column row."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from kvdb.bigt.errors import ColumnNotPresentError, EmptyValueError
from kvdb.utils import byte_to_bool


@dataclass
class ReadItem:
    """One cell of a row; column is the full ``family:qualifier`` name."""

    row: str = ""
    column: str = ""
    timestamp: int = 0
    value: bytes = b""


Row = Mapping[str, Sequence[ReadItem]]


def is_empty_row(row: Row) -> bool:
    return len(row) <= 0


def column_item(row: Row, family_column: str) -> ReadItem | None:
    """Return the first cell named family_column, or None if there is none."""
    for cells in row.values():
        for cell in cells:
            if cell.column == family_column:
                return cell
    return None


def _required_value(row: Row, family_column: str) -> bytes:
    item = column_item(row, family_column)
    if item is None:
        raise ColumnNotPresentError(family_column)
    return bytes(item.value or b"")


def bool_column_item(row: Row, family_column: str) -> bool:
    return byte_to_bool(_required_value(row, family_column))


def string_column_item(row: Row, family_column: str) -> str:
    return _required_value(row, family_column).decode()


def string_list_column_item(row: Row, family_column: str, separator: str) -> list[str]:
    """Split the cell on separator; an empty cell gives an empty list."""
    value = _required_value(row, family_column)
    if not value:
        return []
    return value.decode().split(separator)


def json_column_item(row: Row, family_column: str) -> Any:
    """Decode the cell as JSON."""
    value = _required_value(row, family_column)
    if not value:
        raise ValueError(f'empty value in column "{family_column}"')
    try:
        return json.loads(value)
    except ValueError as exc:
        raise ValueError(f'unmarhalling error in column "{family_column}": {exc}') from exc


def uint64_column_item(row: Row, family_column: str) -> int:
    """Read the first 8 bytes of the cell as a big-endian unsigned integer."""
    value = _required_value(row, family_column)
    if len(value) < 8:
        raise ValueError(
            f'column "{family_column}" holds {len(value)} bytes, 8 are needed for a uint64'
        )
    return int.from_bytes(value[:8], "big")


def bytes_column_reader(row: Row, family_column: str) -> bytes:
    return _required_value(row, family_column)


def big_int_column_reader(row: Row, family_column: str) -> int:
    """Read the cell as an unsigned big-endian integer of any size."""
    return int.from_bytes(bytes_column_reader(row, family_column), "big")


def uint64_column_reader(row: Row, family_column: str) -> int:
    return uint64_column_item(row, family_column)


def proto_column_item(row: Row, family_column: str, proto_resolver: Callable[[], Any]) -> Any:
    """Parse the cell into the protobuf message returned by proto_resolver.

    The resolver is only called once the cell is known to hold data.
    """
    value = _required_value(row, family_column)
    if not value:
        raise EmptyValueError(family_column)
    message = proto_resolver()
    try:
        message.ParseFromString(value)
    except Exception as exc:
        raise ValueError(f'unmarshalling error in column "{family_column}": {exc}') from exc
    return message