"""Column errors and emulator environment helpers for wide-column tables."""

from __future__ import annotations

import os

EMULATOR_HOST_ENV = "BIGTABLE_EMULATOR_HOST"
EMULATOR_DEFAULT_HOST = "localhost:8086"


class ColumnNotPresentError(LookupError):
    """Raised when a row has no cell for the requested family:column."""

    def __init__(self, family_column: str) -> None:
        self.family_column = family_column
        super().__init__(f"column '{family_column}' not present")


class EmptyValueError(ValueError):
    """Raised when a column is present but holds no bytes."""

    def __init__(self, family_column: str) -> None:
        self.family_column = family_column
        super().__init__(f"value '{family_column}' present but empty")


def is_test_env(project: str, instance: str) -> bool:
    """Tell whether the project or the instance names a development setup."""
    return project.startswith("dev") or instance.startswith("dev")


def optional_test_env(project: str, instance: str) -> None:
    """Point the client at the local emulator for development setups.

    An emulator host already present in the environment is left untouched.
    """
    if is_test_env(project, instance) and os.environ.get(EMULATOR_HOST_ENV, "") == "":
        os.environ[EMULATOR_HOST_ENV] = EMULATOR_DEFAULT_HOST