"""Key/value storage abstraction with an embedded backend and encoding helpers."""

__version__ = "0.1.0"