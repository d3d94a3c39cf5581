import os

import pytest

from kvdb.bigt.errors import (
    EMULATOR_DEFAULT_HOST,
    EMULATOR_HOST_ENV,
    ColumnNotPresentError,
    EmptyValueError,
    is_test_env,
    optional_test_env,
)


def test_column_not_present_message():
    err = ColumnNotPresentError("fam:col")
    assert str(err) == "column 'fam:col' not present"
    assert err.family_column == "fam:col"
    assert isinstance(err, LookupError)


def test_empty_value_message():
    err = EmptyValueError("fam:col")
    assert str(err) == "value 'fam:col' present but empty"
    assert err.family_column == "fam:col"
    assert isinstance(err, ValueError)


@pytest.mark.parametrize(
    "project, instance, expected",
    [
        ("dev", "prod", True),
        ("prod", "dev", True),
        ("devproject", "devinstance", True),
        ("prod", "prod", False),
        ("mydev", "instance", False),
    ],
)
def test_is_test_env(project, instance, expected):
    assert is_test_env(project, instance) is expected


def test_optional_test_env_sets_emulator_host(monkeypatch):
    monkeypatch.delenv(EMULATOR_HOST_ENV, raising=False)
    assert is_test_env("dev", "dev") is True
    optional_test_env("dev", "dev")
    assert os.environ.get(EMULATOR_HOST_ENV) == "localhost:8086"
    assert EMULATOR_DEFAULT_HOST == "localhost:8086"


def test_optional_test_env_keeps_existing_host(monkeypatch):
    monkeypatch.setenv(EMULATOR_HOST_ENV, "emulator:1234")
    assert is_test_env("dev", "dev") is True
    optional_test_env("dev", "dev")
    assert os.environ.get(EMULATOR_HOST_ENV) == "emulator:1234"


def test_optional_test_env_replaces_blank_host(monkeypatch):
    monkeypatch.setenv(EMULATOR_HOST_ENV, "")
    assert is_test_env("prod", "devinstance") is True
    optional_test_env("prod", "devinstance")
    assert os.environ.get(EMULATOR_HOST_ENV) == EMULATOR_DEFAULT_HOST


def test_optional_test_env_ignores_production(monkeypatch):
    monkeypatch.delenv(EMULATOR_HOST_ENV, raising=False)
    assert is_test_env("prod", "prod") is False
    optional_test_env("prod", "prod")
    assert os.environ.get(EMULATOR_HOST_ENV) is None