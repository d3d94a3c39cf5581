"""Store options and read options."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class ReadOptions:
    key_only: bool = False

    def log_fields(self) -> dict[str, Any]:
        return {"key_only": self.key_only}


ReadOption = Callable[[ReadOptions], None]


def _apply_key_only(opts: ReadOptions) -> None:
    opts.key_only = True


def key_only() -> ReadOption:
    """Read option asking for keys without their values."""
    return _apply_key_only


def new_read_options(*args: ReadOption) -> ReadOptions | None:
    """Build ReadOptions from options, or None when none are given."""
    if not args:
        return None
    out = ReadOptions()
    for opt in args:
        opt(out)
    return out


@dataclass(frozen=True)
class Option:
    """An option applied to a store right after it is created."""

    action: Callable[[Any], None]

    def apply(self, store: Any) -> None:
        self.action(store)


def _enable_empty(store: Any) -> None:
    enable = getattr(store, "enable_empty", None)
    if callable(enable):
        enable()


def with_empty_value() -> Option:
    """Option allowing empty values on stores that support switching it on."""
    return Option(_enable_empty)