from __future__ import annotations

"""Typed error taxonomy (public).

Only `lrumap` and `lrumap.errors` are public import roots. Everything else is internal.
This module exposes the caller-facing error classes and a small helper `format_error`.
"""

__all__ = [
    "LruMapError",
    "InvalidCapacity",
    "ResourceExhaustion",
    "PolicyError",
    "ConfigError",
    "format_error",
]


class LruMapError(Exception):
    """Base class for all typed, caller-facing errors in lrumap."""
    pass


# Typed errors do not inherit from ValueError; callers should catch the specific subclasses.
class InvalidCapacity(LruMapError):
    """Capacity is not an integer >= 1; the cache is not created."""
    pass


class ResourceExhaustion(LruMapError, MemoryError):
    """Allocation failed while creating a new entry; the cache keeps its pre-call state."""
    pass


class PolicyError(LruMapError):
    """Unknown policy kind or variant name."""
    pass


class ConfigError(LruMapError):
    """Configuration invalid, unknown keys, wrong version, etc."""
    pass


def format_error(e: BaseException) -> str:
    """Return a short, uniform caller-facing message like 'ConfigError: detail'."""
    name = e.__class__.__name__
    msg = str(e).strip()
    return f"{name}: {msg}" if msg else name


# Keep star-export order deterministic for tests and tooling
__all__ = sorted(__all__)
