"""Deterministic capture of cache events.

This module provides a tiny buffered event writer (EventMux) and helpers so
the logging policies can emit their usual `(event, rendered_entry)` pairs
while a caller *buffers* them, then replays them in order later.

Default behavior (no mux set) writes through to the policy's sink.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Callable, Iterator, List, Optional, Tuple

__all__ = [
    "EventMux",
    "EVENT_MUX",
    "set_mux",
    "reset_mux",
    "use_mux",
    "dispatch",
    "flush",
]

Sink = Callable[[str, str], None]


class EventMux:
    """Buffered event writer; also usable directly as a sink.

    Usage:
        mux = EventMux()
        with use_mux(mux):
            cache.insert(1, "a")   # events land in mux instead of the sink
        flush(mux.dump(), sink)
    """

    def __init__(self) -> None:
        self._buf: List[Tuple[str, str]] = []

    def write(self, event: str, rendered: str) -> None:
        self._buf.append((str(event), rendered))

    __call__ = write

    def dump(self) -> List[Tuple[str, str]]:
        return list(self._buf)

    def events(self) -> List[str]:
        return [event for event, _ in self._buf]

    def clear(self) -> None:
        self._buf.clear()

    def __len__(self) -> int:
        return len(self._buf)


# Context variable holding the active mux (if any) for the current task/thread
EVENT_MUX: ContextVar[Optional[EventMux]] = ContextVar("EVENT_MUX", default=None)


def set_mux(mux: Optional[EventMux]) -> Token:
    """Activate a mux for the current context and return a reset token."""
    return EVENT_MUX.set(mux)


def reset_mux(token: Token) -> None:
    """Reset the mux context back to a previous state using the token."""
    EVENT_MUX.reset(token)


@contextmanager
def use_mux(mux: Optional[EventMux]) -> Iterator[Optional[EventMux]]:
    """Context manager to set/reset a mux for the current context."""
    token = set_mux(mux)
    try:
        yield mux
    finally:
        reset_mux(token)


def dispatch(sink: Sink, event: str, rendered: str) -> None:
    """Write to the active mux if present; else call the sink synchronously."""
    mux = EVENT_MUX.get()
    if mux is not None:
        mux.write(event, rendered)
        return
    sink(event, rendered)


def flush(pairs: List[Tuple[str, str]], sink: Sink) -> None:
    """Replay (event, rendered) pairs through `sink` in order."""
    for event, rendered in pairs:
        sink(event, rendered)
