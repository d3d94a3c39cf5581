from urllib.parse import parse_qs, urlsplit

import pytest

from kvdb.store.dsnopts import (
    DSNQuery,
    parse_duration,
    remove_dsn_options,
    remove_dsn_options_from_url,
)


@pytest.mark.parametrize(
    "dsn, keys, expected",
    [
        ("kv://value", [], "kv://value"),
        ("kv://value", ["a", "b", "c"], "kv://value"),
        ("kv://value?e=5", ["a", "b", "c"], "kv://value?e=5"),
        ("kv://value?c=3", ["c", "c", "c"], "kv://value"),
        ("kv://value?a=1&b=2&e=5", ["c", "f", "g"], "kv://value?a=1&b=2&e=5"),
        ("kv://value?a=1&b=2&e=5", ["b", "e", "e"], "kv://value?a=1"),
        ("kv://value?a=1&b=2&e=5&a=11&b=22&e=55", ["b", "e", "e"], "kv://value?a=1&a=11"),
    ],
)
def test_remove_dsn_options(dsn, keys, expected):
    assert remove_dsn_options(dsn, *keys) == expected


def test_remove_dsn_options_from_url_returns_copy():
    original = urlsplit("kv://host/path?a=1&b=2")
    stripped = remove_dsn_options_from_url(original, "a")
    assert stripped.query == "b=2"
    assert stripped.path == "/path"
    assert original.query == "a=1&b=2"


def _query(text):
    return DSNQuery(parse_qs(text, keep_blank_values=True))


def test_string_option():
    query = _query("name=hello")
    assert query.string_option("name", "dflt") == ("hello", "hello")
    assert query.string_option("missing", "dflt") == ("dflt", "")


def test_int_option():
    query = _query("count=42&bad=4x")
    assert query.int_option("count", 7) == (42, "42")
    assert query.int_option("missing", 7) == (7, "")
    with pytest.raises(ValueError):
        query.int_option("bad", 7)


def test_duration_option():
    query = _query("wait=1.5s&bad=five")
    assert query.duration_option("wait", 0.0) == (1.5, "1.5s")
    assert query.duration_option("missing", 2.0) == (2.0, "")
    with pytest.raises(ValueError):
        query.duration_option("bad", 0.0)


@pytest.mark.parametrize(
    "text, seconds",
    [
        ("0", 0.0),
        ("1s", 1.0),
        ("1h30m", 5400.0),
        ("300ms", 0.3),
        ("-2m", -120.0),
        ("1.5h", 5400.0),
        ("1000us", 0.001),
    ],
)
def test_parse_duration(text, seconds):
    assert parse_duration(text) == pytest.approx(seconds)


@pytest.mark.parametrize("text", ["", "abc", "1x", "1", ".s", "-"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)