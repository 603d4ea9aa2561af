"""Timestamping policies.

TimestampAll records the clock on every modify (insert) and access (find hit)
and lets the engine audit the LRU ordering: walking the recency list from
front to back, the newer of each entry's two timestamps must never increase.
TimestampNone keeps no fields and, having nothing to check, always audits as
valid.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional, Tuple

from ..util.clock import Clock, monotonic_usecs

__all__ = ["TimestampNone", "TimestampAll"]


class TimestampNone:
    name = "none"
    entry_fields: Tuple[str, ...] = ()

    def on_access(self, entry: Any) -> None:
        return None

    def on_modify(self, entry: Any) -> None:
        return None

    def audit(self, entries: Iterable[Any]) -> bool:
        return True

    @staticmethod
    def render(entry: Any) -> str:
        return ""

    def __repr__(self) -> str:
        return "TimestampNone()"


class TimestampAll:
    """Record `access_usecs` (find hits) and `modify_usecs` (inserts) from `clock`."""

    name = "all"
    entry_fields: Tuple[str, ...] = ("access_usecs", "modify_usecs")

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock if clock is not None else monotonic_usecs

    def on_access(self, entry: Any) -> None:
        entry.access_usecs = int(self.clock())

    def on_modify(self, entry: Any) -> None:
        entry.modify_usecs = int(self.clock())

    def audit(self, entries: Iterable[Any]) -> bool:
        """True iff max(access_usecs, modify_usecs) is non-increasing front → back.

        Malformed entries (missing or non-numeric fields) audit as False.
        """
        prev: Optional[int] = None
        try:
            for entry in entries:
                recent = max(entry.access_usecs, entry.modify_usecs)
                if prev is not None and recent > prev:
                    return False
                prev = recent
        except (AttributeError, TypeError):
            return False
        return True

    @staticmethod
    def render(entry: Any) -> str:
        return f"| atime = {entry.access_usecs}; mtime = {entry.modify_usecs}"

    def __repr__(self) -> str:
        return f"TimestampAll(clock={getattr(self.clock, '__name__', self.clock)!r})"
