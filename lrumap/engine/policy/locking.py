"""Locking policies.

Storage and behavior are separate capabilities:
  • attach(cache) adds whatever lock storage the policy needs to the cache.
  • acquire(cache) returns a context manager held for one public operation.

LockNone attaches nothing and acquires a shared no-op context; LockExclusive
attaches exactly one non-reentrant `threading.Lock` as `cache._mutex`.
"""
from __future__ import annotations

import threading
from contextlib import nullcontext
from typing import Any, ContextManager

__all__ = ["LockNone", "LockExclusive"]

_NO_LOCK: ContextManager[Any] = nullcontext()


class LockNone:
    """No locking; the caller is single-threaded or serializes externally."""

    name = "none"

    def attach(self, cache: Any) -> None:
        return None

    def acquire(self, cache: Any) -> ContextManager[Any]:
        return _NO_LOCK

    def __repr__(self) -> str:
        return "LockNone()"


class LockExclusive:
    """
    Exclusive, non-reentrant mutex held for the full duration of every public
    operation, observers included. Re-entering the cache from a policy hook
    deadlocks.
    """

    name = "exclusive"

    def attach(self, cache: Any) -> None:
        cache._mutex = threading.Lock()

    def acquire(self, cache: Any) -> ContextManager[Any]:
        return cache._mutex

    def __repr__(self) -> str:
        return "LockExclusive()"
