"""Event logging policies.

Each logged event is one sink call `sink(event_name, entry.render())`, made
in the order the engine invokes the hooks. Event names are fixed:
"Insert", "Overflow", "Find", "Erase".
"""
from __future__ import annotations

from typing import Any, Optional

from ..util.logmux import dispatch
from ...io.log import Sink, logger_sink

__all__ = [
    "INSERT",
    "OVERFLOW",
    "FIND",
    "ERASE",
    "LogEventNone",
    "LogEventOverflow",
    "LogEventAll",
]

INSERT = "Insert"
OVERFLOW = "Overflow"
FIND = "Find"
ERASE = "Erase"


class LogEventNone:
    name = "none"

    def log_insert(self, entry: Any) -> None:
        return None

    def log_overflow(self, entry: Any) -> None:
        return None

    def log_find(self, entry: Any) -> None:
        return None

    def log_erase(self, entry: Any) -> None:
        return None

    def __repr__(self) -> str:
        return "LogEventNone()"


class _SinkLogger:
    def __init__(self, sink: Optional[Sink] = None) -> None:
        self.sink: Sink = sink if sink is not None else logger_sink()

    def _log(self, event: str, entry: Any) -> None:
        dispatch(self.sink, event, entry.render())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sink={self.sink!r})"


class LogEventOverflow(_SinkLogger):
    """Log evictions only."""

    name = "overflow"

    def log_insert(self, entry: Any) -> None:
        return None

    def log_overflow(self, entry: Any) -> None:
        self._log(OVERFLOW, entry)

    def log_find(self, entry: Any) -> None:
        return None

    def log_erase(self, entry: Any) -> None:
        return None


class LogEventAll(_SinkLogger):
    """Log every insert, overflow, find hit and erase of a present key."""

    name = "all"

    def log_insert(self, entry: Any) -> None:
        self._log(INSERT, entry)

    def log_overflow(self, entry: Any) -> None:
        self._log(OVERFLOW, entry)

    def log_find(self, entry: Any) -> None:
        self._log(FIND, entry)

    def log_erase(self, entry: Any) -> None:
        self._log(ERASE, entry)
