"""Entry records for the LRU engine.

An entry is a `Link` (it lives directly in the recency list) carrying the
key, the value, and only the metadata fields the selected policies declare.
Entry classes are synthesized per (timestamping, hit-counting) policy pair
with `__slots__` limited to those fields, so an inactive policy contributes
no per-entry storage. `render` is taken from the policy instance, like
every other hook.
"""
from __future__ import annotations

import inspect
from functools import lru_cache
from typing import Any, Callable, Tuple, Type

from .recency import Link

__all__ = ["Entry", "entry_type"]


def _render_nothing(entry: "Entry") -> str:
    return ""


class Entry(Link):
    """Key/value node; policy fields are added by `entry_type` subclasses."""

    __slots__ = ("key", "value")

    # Class-level renderers; never per-entry storage.
    _render_timestamps: Callable[["Entry"], str] = staticmethod(_render_nothing)
    _render_hit_count: Callable[["Entry"], str] = staticmethod(_render_nothing)
    _policy_fields: Tuple[str, ...] = ()

    def __init__(self, key: Any, value: Any) -> None:
        Link.__init__(self)
        self.key = key
        self.value = value

    def render(self) -> str:
        """`<key>; <value>` followed by the policy renderings (no trailing newline)."""
        return (
            f"{self.key}; {self.value}"
            + self._render_timestamps(self)
            + self._render_hit_count(self)
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.render()}>"


def _renderer(policy: Any) -> Callable[["Entry"], str]:
    """The policy's `render`: the plain function when it is a staticmethod,
    otherwise the method bound to this policy instance."""
    if isinstance(inspect.getattr_static(type(policy), "render", None), staticmethod):
        return type(policy).render
    return policy.render


def entry_type(timestamps: Any, hit_count: Any) -> Type[Entry]:
    """Return the entry class for a pair of policy instances.

    The class gets one slot per name in each policy's `entry_fields`, all
    initialised to 0, and renders through each policy's `render`. Classes
    are shared between caches whenever both renderers are staticmethods;
    a policy with an instance `render` gets an entry class of its own.
    """
    return _synthesize(
        type(timestamps), type(hit_count), _renderer(timestamps), _renderer(hit_count)
    )


def _synthesize(
    timestamp_cls: type,
    hit_count_cls: type,
    render_timestamps: Callable[["Entry"], str],
    render_hit_count: Callable[["Entry"], str],
) -> Type[Entry]:
    if inspect.ismethod(render_timestamps) or inspect.ismethod(render_hit_count):
        return _build(timestamp_cls, hit_count_cls, render_timestamps, render_hit_count)
    return _build_shared(timestamp_cls, hit_count_cls, render_timestamps, render_hit_count)


def _build(
    timestamp_cls: type,
    hit_count_cls: type,
    render_timestamps: Callable[["Entry"], str],
    render_hit_count: Callable[["Entry"], str],
) -> Type[Entry]:
    fields: Tuple[str, ...] = tuple(getattr(timestamp_cls, "entry_fields", ())) + tuple(
        getattr(hit_count_cls, "entry_fields", ())
    )
    if len(set(fields)) != len(fields):
        raise ValueError(f"policies declare overlapping entry fields: {fields}")

    def __init__(self: Entry, key: Any, value: Any) -> None:
        Entry.__init__(self, key, value)
        for name in fields:
            setattr(self, name, 0)

    namespace = {
        "__slots__": fields,
        "__init__": __init__ if fields else Entry.__init__,
        "_policy_fields": fields,
        "_render_timestamps": staticmethod(render_timestamps),
        "_render_hit_count": staticmethod(render_hit_count),
    }
    name = f"Entry_{timestamp_cls.__name__}_{hit_count_cls.__name__}"
    return type(name, (Entry,), namespace)


# Only static renderers reach this cache, so it never pins policy instances.
_build_shared = lru_cache(maxsize=None)(_build)
