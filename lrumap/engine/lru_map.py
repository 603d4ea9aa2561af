"""Bounded LRU map with pluggable policies.

LruMap keeps the `capacity` most recently used entries. Two structures are
kept in lock-step:

  • the index, a dict mapping key → entry node;
  • the recency list, an intrusive doubly-linked list of the same nodes,
    front = most recent, back = least recent.

Recency changes only on insert (new or existing key) and on find hits.
exists(), keys(), items(), render() and the other observers never touch
recency or statistics.

Policies are selected at construction and never change:

  • locking     - LockNone (default) | LockExclusive
  • timestamps  - TimestampNone (default) | TimestampAll
  • hit_count   - HitCountDisabled (default) | HitCountEnabled
  • events      - LogEventNone (default) | LogEventOverflow | LogEventAll

Hooks always fire after the structural change they describe, in a fixed
order (see insert() and find()). A hook must not call back into the same
cache.
"""
from __future__ import annotations

import logging
import operator
from typing import Any, Dict, Generic, Hashable, List, Mapping, Optional, Tuple, TypeVar

from ..errors import InvalidCapacity, ResourceExhaustion
from .entry import Entry, entry_type
from .policy import (
    HitCountDisabled,
    LockNone,
    LogEventNone,
    TimestampNone,
    resolve_policy,
)
from .recency import RecencyList
from .stats import LruMapStats

__all__ = ["LruMap", "DUMP_HEADER"]

_logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DUMP_HEADER = "key; value| atime; mtime"

_LOCK_NONE = LockNone()
_TIMESTAMP_NONE = TimestampNone()
_HIT_COUNT_DISABLED = HitCountDisabled()
_LOG_EVENT_NONE = LogEventNone()


def _check_capacity(capacity: Any) -> int:
    if isinstance(capacity, bool):
        raise InvalidCapacity(f"capacity must be an integer >= 1 (got {capacity!r})")
    try:
        cap = operator.index(capacity)
    except TypeError:
        raise InvalidCapacity(f"capacity must be an integer >= 1 (got {capacity!r})") from None
    if cap < 1:
        raise InvalidCapacity(f"capacity must be an integer >= 1 (got {cap})")
    return cap


class LruMap(Generic[K, V]):
    """
    Least-recently-used map with a fixed capacity.

    Example:
      >>> m = LruMap(2)
      >>> m.insert("a", 1)
      >>> m.insert("b", 2)
      >>> m.find("a")
      1
      >>> m.insert("c", 3)   # evicts "b", the least recently used
      >>> m.exists("b")
      False

    find() returns the stored value object itself, not a copy. It is only
    guaranteed to be the cached value until the next mutating call on the
    cache (or, under LockExclusive, until another caller takes the lock).
    """

    def __init__(
        self,
        capacity: int,
        *,
        locking: Any = None,
        timestamps: Any = None,
        hit_count: Any = None,
        events: Any = None,
    ) -> None:
        self._capacity = _check_capacity(capacity)
        self._locking = locking if locking is not None else _LOCK_NONE
        self._timestamps = timestamps if timestamps is not None else _TIMESTAMP_NONE
        self._hit_count = hit_count if hit_count is not None else _HIT_COUNT_DISABLED
        self._events = events if events is not None else _LOG_EVENT_NONE

        self._entry_type = entry_type(self._timestamps, self._hit_count)
        self._index: Dict[K, Entry] = {}
        self._list = RecencyList()
        self._stats = LruMapStats()
        self._locking.attach(self)

        _logger.debug(
            "LruMap layout: capacity = %d, entry = %s, entry slots = %s, "
            "locking = %r, timestamps = %r, hit_count = %r, events = %r",
            self._capacity,
            self._entry_type.__name__,
            ("key", "value") + self._entry_type._policy_fields,
            self._locking,
            self._timestamps,
            self._hit_count,
            self._events,
        )

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "LruMap[Any, Any]":
        """Build a cache from a config dict (see configs.validate).

        Accepts either the full config (with an `lru` section) or the `lru`
        section itself. The config is validated and normalized first.
        """
        from configs.validate import validate_config

        from ..io.log import build_sink

        raw = dict(cfg or {})
        full = raw if "lru" in raw or "version" in raw else {"lru": raw}
        lru = validate_config(full)["lru"]
        names = lru["policies"]

        events_name = names["events"]
        events_kwargs: Dict[str, Any] = {}
        if events_name != "none":
            events_kwargs["sink"] = build_sink(lru["sink"], log_file=lru.get("log_file"))

        return cls(
            lru["capacity"],
            locking=resolve_policy("locking", names["locking"]),
            timestamps=resolve_policy("timestamps", names["timestamps"]),
            hit_count=resolve_policy("hit_count", names["hit_count"]),
            events=resolve_policy("events", events_name, **events_kwargs),
        )

    # -- Policy introspection ---------------------------------------------

    @property
    def policies(self) -> Dict[str, Any]:
        return {
            "locking": self._locking,
            "timestamps": self._timestamps,
            "hit_count": self._hit_count,
            "events": self._events,
        }

    # -- Core operations ---------------------------------------------------

    def insert(self, key: K, value: V) -> None:
        """Insert or overwrite `key`; it becomes the most recent entry.

        Hook order: timestamps.on_modify, events.log_insert, then (only when a
        new key pushed the size over capacity) events.log_overflow on the
        least recent entry, which is then removed.
        """
        with self._locking.acquire(self):
            entry = self._index.get(key)
            if entry is not None:
                self._list.move_to_front(entry)
                entry.value = value
            else:
                try:
                    entry = self._entry_type(key, value)
                    self._index[key] = entry
                except MemoryError as e:
                    raise ResourceExhaustion(f"cannot allocate an entry for key {key!r}") from e
                self._list.push_front(entry)

            try:
                self._timestamps.on_modify(entry)
                self._events.log_insert(entry)
            finally:
                if len(self._list) > self._capacity:
                    self._evict_lru()

            self._stats.num_insert += 1

    def find(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Return the value for `key` (making it most recent) or `default` on a miss.

        Hook order on a hit: hit_count.on_find_hit, events.log_find,
        timestamps.on_access.
        """
        with self._locking.acquire(self):
            self._stats.num_find += 1
            entry = self._index.get(key)
            if entry is None:
                return default
            self._list.move_to_front(entry)
            self._stats.num_find_ok += 1
            self._hit_count.on_find_hit(entry)
            self._events.log_find(entry)
            self._timestamps.on_access(entry)
            return entry.value

    def exists(self, key: K) -> bool:
        """Membership only: no recency change, no statistics."""
        with self._locking.acquire(self):
            return key in self._index

    __contains__ = exists

    def erase(self, key: K) -> None:
        """Remove `key` if present; an absent key only counts the call."""
        with self._locking.acquire(self):
            self._stats.num_erase += 1
            entry = self._index.get(key)
            if entry is None:
                return
            self._events.log_erase(entry)
            self._unlink(entry)

    def clear(self) -> None:
        """Drop all entries; capacity and cumulative statistics are kept."""
        with self._locking.acquire(self):
            self._list.clear()
            self._index.clear()
            self._stats.num_clear += 1

    # -- Observers -----------------------------------------------------------

    def capacity(self) -> int:
        return self._capacity

    def size(self) -> int:
        with self._locking.acquire(self):
            return self._size_unlocked()

    def __len__(self) -> int:
        return self.size()

    def valid(self) -> bool:
        """Audit the recency order through the timestamping policy.

        Always True without recorded timestamps. Never raises.
        """
        with self._locking.acquire(self):
            return bool(self._timestamps.audit(iter(self._list)))

    def render(self) -> str:
        """Human-readable dump: header, one line per entry front → back, blank line."""
        with self._locking.acquire(self):
            lines = [DUMP_HEADER + "\n"]
            lines.extend(entry.render() + "\n" for entry in self._list)
            lines.append("\n")
            return "".join(lines)

    __str__ = render

    def stats(self) -> LruMapStats:
        """Snapshot copy of the cumulative statistics."""
        with self._locking.acquire(self):
            s = self._stats
            return LruMapStats(
                num_insert=s.num_insert,
                num_overflow=s.num_overflow,
                num_find=s.num_find,
                num_find_ok=s.num_find_ok,
                num_erase=s.num_erase,
                num_clear=s.num_clear,
            )

    def keys(self) -> List[K]:
        """Keys front (most recent) → back; does not refresh recency."""
        with self._locking.acquire(self):
            return [entry.key for entry in self._list]

    def items(self) -> List[Tuple[K, V]]:
        """(key, value) pairs front → back; does not refresh recency."""
        with self._locking.acquire(self):
            return [(entry.key, entry.value) for entry in self._list]

    def __repr__(self) -> str:
        return f"LruMap(capacity={self._capacity}, size={len(self._list)})"

    # -- Internal helpers (caller holds the lock) ---------------------------

    def _size_unlocked(self) -> int:
        assert len(self._list) == len(self._index)
        return len(self._list)

    def _unlink(self, entry: Entry) -> None:
        del self._index[entry.key]
        self._list.remove(entry)

    def _evict_lru(self) -> None:
        victim = self._list.back()
        assert victim is not None
        try:
            self._events.log_overflow(victim)
        finally:
            self._unlink(victim)
            self._stats.num_overflow += 1
