import json
import logging
from pathlib import Path

import pytest

from lrumap import JsonlSink, LogEventAll, LogEventOverflow, LruMap, logger_sink
from lrumap.engine.util.logmux import EventMux
from lrumap.errors import ConfigError
from lrumap.io.log import EVENTS_LOGGER, append_jsonl, build_sink


def test_logger_sink_formats_event_and_entry(caplog):
    caplog.set_level(logging.INFO, logger=EVENTS_LOGGER)
    cache = LruMap(2, events=LogEventAll(sink=logger_sink()))
    cache.insert(1, 5)
    cache.find(1)
    messages = [r.getMessage() for r in caplog.records if r.name == EVENTS_LOGGER]
    assert messages == ["Insert: 1; 5", "Find: 1; 5"]


def test_default_sink_is_the_events_logger(caplog):
    caplog.set_level(logging.INFO, logger=EVENTS_LOGGER)
    cache = LruMap(1, events=LogEventOverflow())
    cache.insert("a", 1)
    cache.insert("b", 2)
    messages = [r.getMessage() for r in caplog.records if r.name == EVENTS_LOGGER]
    assert messages == ["Overflow: a; 1"]


def test_jsonl_sink_appends_one_record_per_event(_isolated_log_dir: Path):
    sink = JsonlSink("events.jsonl")
    cache = LruMap(1, events=LogEventAll(sink=sink))
    cache.insert(1, "x")
    cache.insert(2, "y")
    cache.erase(2)

    p = _isolated_log_dir / "events.jsonl"
    assert p.exists()
    raw = p.read_bytes()
    assert b"\r\n" not in raw
    rows = [json.loads(line) for line in raw.decode("utf-8").splitlines()]
    assert rows == [
        {"event": "Insert", "entry": "1; x"},
        {"event": "Insert", "entry": "2; y"},
        {"event": "Overflow", "entry": "1; x"},
        {"event": "Erase", "entry": "2; y"},
    ]


def test_append_jsonl_honors_explicit_paths(tmp_path: Path):
    target = tmp_path / "nested" / "out.jsonl"
    written = append_jsonl(str(target), {"k": 1})
    assert Path(written) == target
    assert json.loads(target.read_text(encoding="utf-8")) == {"k": 1}


def test_build_sink_names():
    assert isinstance(build_sink("jsonl", log_file="x.jsonl"), JsonlSink)
    assert isinstance(build_sink("buffer"), EventMux)
    assert callable(build_sink("Logger"))
    with pytest.raises(ConfigError):
        build_sink("syslog")
