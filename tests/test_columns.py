import pytest

from kvdb.bigt.columns import (
    ReadItem,
    big_int_column_reader,
    bool_column_item,
    bytes_column_reader,
    column_item,
    is_empty_row,
    json_column_item,
    proto_column_item,
    string_column_item,
    string_list_column_item,
    uint64_column_item,
    uint64_column_reader,
)
from kvdb.bigt.errors import ColumnNotPresentError, EmptyValueError


def _row(value, column="test"):
    return {"any": [ReadItem(column=column, value=value)]}


class _FakeMessage:
    def __init__(self):
        self.data = None

    def ParseFromString(self, data):
        if data == b"bad":
            raise RuntimeError("broken")
        self.data = data
        return len(data)


@pytest.mark.parametrize(
    "value, expected",
    [
        (b"", []),
        (b"a", ["a"]),
        (b"a:b:c", ["a", "b", "c"]),
        (b"a::c", ["a", "", "c"]),
        (b":ac:", ["", "ac", ""]),
        (b"a,b,c", ["a,b,c"]),
    ],
)
def test_string_list_column_item(value, expected):
    assert string_list_column_item(_row(value), "test", ":") == expected


def test_string_list_column_item_none_value():
    assert string_list_column_item(_row(None), "test", ":") == []


def test_missing_column_raises():
    with pytest.raises(ColumnNotPresentError) as exc_info:
        string_list_column_item(_row(b"a"), "other", ":")
    assert exc_info.value.family_column == "other"


def test_is_empty_row():
    assert is_empty_row({}) is True
    assert is_empty_row(_row(b"x")) is False


def test_column_item_finds_across_families():
    cell = ReadItem(column="f2:c", value=b"v")
    row = {"f1": [ReadItem(column="f1:c", value=b"w")], "f2": [cell]}
    assert column_item(row, "f2:c") is cell
    assert column_item(row, "f3:c") is None


def test_bool_column_item():
    assert bool_column_item(_row(b"\x01"), "test") is True
    assert bool_column_item(_row(b"\x00"), "test") is False
    assert bool_column_item(_row(b""), "test") is False
    with pytest.raises(ColumnNotPresentError):
        bool_column_item(_row(b"\x01"), "nope")


def test_string_column_item():
    assert string_column_item(_row(b"hello"), "test") == "hello"


def test_json_column_item():
    assert json_column_item(_row(b'{"a": [1, 2]}'), "test") == {"a": [1, 2]}


def test_json_column_item_empty():
    with pytest.raises(ValueError, match='empty value in column "test"'):
        json_column_item(_row(b""), "test")


def test_json_column_item_invalid():
    with pytest.raises(ValueError, match='error in column "test"'):
        json_column_item(_row(b"{nope"), "test")


def test_uint64_column_item_round_trip():
    value = 0x0102030405060708
    assert uint64_column_item(_row(value.to_bytes(8, "big")), "test") == value
    assert uint64_column_reader(_row(value.to_bytes(8, "big")), "test") == value


def test_uint64_column_item_too_short():
    with pytest.raises(ValueError):
        uint64_column_item(_row(b"\x01\x02"), "test")


def test_bytes_and_big_int_readers():
    data = (2**80 + 5).to_bytes(11, "big")
    assert bytes_column_reader(_row(data), "test") == data
    assert big_int_column_reader(_row(data), "test") == 2**80 + 5
    assert big_int_column_reader(_row(b""), "test") == 0
    with pytest.raises(ColumnNotPresentError):
        big_int_column_reader(_row(data), "missing")


def test_proto_column_item_parses():
    message = proto_column_item(_row(b"payload"), "test", _FakeMessage)
    assert message.data == b"payload"


def test_proto_column_item_empty_value():
    calls = []

    def resolver():
        calls.append(1)
        return _FakeMessage()

    with pytest.raises(EmptyValueError):
        proto_column_item(_row(b""), "test", resolver)
    assert calls == []


def test_proto_column_item_missing_and_bad():
    with pytest.raises(ColumnNotPresentError):
        proto_column_item(_row(b"x"), "other", _FakeMessage)
    with pytest.raises(ValueError, match='unmarshalling error in column "test"'):
        proto_column_item(_row(b"bad"), "test", _FakeMessage)