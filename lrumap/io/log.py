"""Event sinks for the logging policies.

A sink is any callable `sink(event_name, rendered_entry) -> None`. It is
synchronous: the engine continues only after it returns.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from . import paths
from ..engine.util.logmux import EventMux
from ..errors import ConfigError

__all__ = [
    "Sink",
    "EVENTS_LOGGER",
    "append_jsonl",
    "logger_sink",
    "JsonlSink",
    "build_sink",
]

Sink = Callable[[str, str], None]

EVENTS_LOGGER = "lrumap.events"


def append_jsonl(filename: str, record: Dict[str, Any]) -> Path:
    """Append one JSON record to `filename` (bare names resolve under logs_dir()).

    Write deterministically across OS:
      - Binary append avoids platform newline translation (e.g., CRLF on Windows).
      - Records are always terminated with a single LF.
    """
    if os.path.isabs(filename) or os.sep in filename or "/" in filename:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
    else:
        path = paths.logs_dir() / filename
    line = (json.dumps(record, ensure_ascii=False) + "\n").encode("utf-8")
    with open(path, "ab") as f:
        f.write(line)
    return path


def logger_sink(logger: Optional[logging.Logger] = None, level: int = logging.INFO) -> Sink:
    """Sink writing `"<Event>: <rendered>"` records to a stdlib logger."""
    log = logger if logger is not None else logging.getLogger(EVENTS_LOGGER)

    def _emit(event: str, rendered: str) -> None:
        log.log(level, "%s: %s", event, rendered)

    return _emit


class JsonlSink:
    """Sink appending `{"event": ..., "entry": ...}` lines to a JSONL file."""

    def __init__(self, filename: str = "lru_events.jsonl") -> None:
        self.filename = str(filename)

    def __call__(self, event: str, rendered: str) -> None:
        append_jsonl(self.filename, {"event": event, "entry": rendered})

    def __repr__(self) -> str:
        return f"JsonlSink({self.filename!r})"


def build_sink(name: str, *, log_file: Optional[str] = None) -> Sink:
    """Map a config sink name (logger | jsonl | buffer) to a sink."""
    key = str(name).strip().lower()
    if key == "logger":
        return logger_sink()
    if key == "jsonl":
        return JsonlSink(log_file or "lru_events.jsonl")
    if key == "buffer":
        return EventMux()
    raise ConfigError(f"lru.sink: unknown sink {name!r} (expected logger | jsonl | buffer)")
