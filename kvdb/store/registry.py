"""Registry of store drivers, selected by the scheme of a DSN."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from kvdb.store.interface import KVStore
from kvdb.store.options import Option

NewStoreFunc = Callable[[str], KVStore]


@dataclass(frozen=True)
class Registration:
    name: str
    title: str
    factory_func: NewStoreFunc


_registry: dict[str, Registration] = {}


def register(reg: Registration) -> None:
    """Add a driver; its name must be non-blank and not yet registered."""
    if not reg.name:
        raise ValueError("name cannot be blank")
    if reg.name in _registry:
        raise ValueError(f"already registered: {reg.name}")
    _registry[reg.name] = reg


def is_registered(name: str) -> bool:
    return name in _registry


def new_store(dsn: str, *args: Option) -> KVStore:
    """Open a store with the driver named by the DSN scheme, then apply options."""
    scheme = dsn.split(":", 1)[0]
    reg = _registry.get(scheme)
    if reg is None:
        raise ValueError(f'no such kv store registered "{scheme}"')
    store = reg.factory_func(dsn)
    for opt in args:
        opt.apply(store)
    return store


def by_name(name: str) -> Registration | None:
    """Return a registered driver, or None."""
    return _registry.get(name)