import pytest

from lrumap import (
    FixedStepClock,
    HitCountDisabled,
    HitCountEnabled,
    LockExclusive,
    LockNone,
    LogEventAll,
    LogEventNone,
    LogEventOverflow,
    LruMap,
    TimestampAll,
    TimestampNone,
    resolve_policy,
)
from lrumap.engine.entry import Entry, entry_type
from lrumap.engine.lru_map import DUMP_HEADER
from lrumap.engine.util.logmux import EventMux
from lrumap.errors import PolicyError


class _Recorder:
    """Stands in for every hook-bearing policy and records call order."""

    name = "recorder"
    entry_fields = ()

    def __init__(self, calls, fail_on=None):
        self.calls = calls
        self.fail_on = fail_on

    def _hit(self, name, entry):
        self.calls.append((name, entry.key))
        if name == self.fail_on:
            raise RuntimeError(f"hook {name} failed")

    # timestamps
    def on_modify(self, entry):
        self._hit("on_modify", entry)

    def on_access(self, entry):
        self._hit("on_access", entry)

    def audit(self, entries):
        return True

    @staticmethod
    def render(entry):
        return ""

    # hit counting
    def on_find_hit(self, entry):
        self._hit("on_find_hit", entry)

    # events
    def log_insert(self, entry):
        self._hit("log_insert", entry)

    def log_overflow(self, entry):
        self._hit("log_overflow", entry)

    def log_find(self, entry):
        self._hit("log_find", entry)

    def log_erase(self, entry):
        self._hit("log_erase", entry)


def _recording_cache(capacity, calls, fail_on=None):
    rec = _Recorder(calls, fail_on=fail_on)
    return LruMap(capacity, timestamps=rec, hit_count=rec, events=rec)


def test_insert_hook_order_with_overflow():
    calls = []
    cache = _recording_cache(1, calls)
    cache.insert("a", 1)
    cache.insert("b", 2)
    assert calls == [
        ("on_modify", "a"),
        ("log_insert", "a"),
        ("on_modify", "b"),
        ("log_insert", "b"),
        ("log_overflow", "a"),
    ]


def test_find_hook_order_and_miss_is_silent():
    calls = []
    cache = _recording_cache(2, calls)
    cache.insert("a", 1)
    calls.clear()
    cache.find("a")
    cache.find("zzz")
    assert calls == [("on_find_hit", "a"), ("log_find", "a"), ("on_access", "a")]


def test_erase_logs_only_present_keys():
    calls = []
    cache = _recording_cache(2, calls)
    cache.insert("a", 1)
    calls.clear()
    cache.erase("missing")
    cache.erase("a")
    assert calls == [("log_erase", "a")]
    assert cache.stats().num_erase == 2


def test_raising_overflow_sink_still_evicts():
    calls = []
    cache = _recording_cache(1, calls, fail_on="log_overflow")
    cache.insert("a", 1)
    with pytest.raises(RuntimeError):
        cache.insert("b", 2)
    assert cache.size() == 1
    assert cache.keys() == ["b"]
    assert not cache.exists("a")
    assert cache.stats().num_overflow == 1
    cache.policies["events"].fail_on = None
    cache.insert("c", 3)
    assert cache.size() == 1


def test_raising_insert_hook_keeps_size_bound():
    calls = []
    cache = _recording_cache(1, calls, fail_on="log_insert")
    with pytest.raises(RuntimeError):
        cache.insert("a", 1)
    with pytest.raises(RuntimeError):
        cache.insert("b", 2)
    assert cache.size() == 1
    assert cache.keys() == ["b"]
    assert cache.valid()


def test_entry_render_formats():
    clock = FixedStepClock(start=1000, step=1)
    cache = LruMap(4, timestamps=TimestampAll(clock), hit_count=HitCountEnabled())
    cache.insert(1, 5)   # mtime 1000
    cache.find(1)        # atime 1001
    assert cache._index[1].render() == "1; 5| atime = 1001; mtime = 1000| hit_count = 1"

    plain = LruMap(4)
    plain.insert(1, 5)
    assert plain._index[1].render() == "1; 5"


def test_render_dump_lists_entries_front_to_back():
    cache = LruMap(4, hit_count=HitCountEnabled())
    cache.insert(0, 0)
    cache.insert(1, 5)
    cache.find(0)
    assert cache.render() == (
        DUMP_HEADER + "\n"
        "0; 0| hit_count = 1\n"
        "1; 5| hit_count = 0\n"
        "\n"
    )
    assert str(cache) == cache.render()


def test_inactive_policies_add_no_per_entry_storage():
    cache = LruMap(2)
    cache.insert("k", "v")
    entry = cache._index["k"]
    assert not hasattr(entry, "__dict__")
    assert not hasattr(entry, "hit_count")
    assert not hasattr(entry, "access_usecs")
    assert not hasattr(entry, "modify_usecs")
    assert not hasattr(cache, "_mutex")


def test_active_policies_add_exactly_their_fields():
    et = entry_type(TimestampAll(), HitCountEnabled())
    assert issubclass(et, Entry)
    assert et._policy_fields == ("access_usecs", "modify_usecs", "hit_count")
    e = et("k", "v")
    assert (e.access_usecs, e.modify_usecs, e.hit_count) == (0, 0, 0)
    # Same policy classes with static renderers share one synthesized type
    assert entry_type(TimestampAll(), HitCountEnabled()) is et
    assert entry_type(TimestampNone(), HitCountDisabled()) is not et


class _TaggedTimestamps(TimestampNone):
    """Renders through an ordinary method that reads instance state."""

    def __init__(self, tag):
        self.tag = tag

    def render(self, entry):
        return f"| {self.tag}"


def test_instance_render_uses_the_policy_passed_in():
    first = LruMap(2, timestamps=_TaggedTimestamps("first"))
    second = LruMap(2, timestamps=_TaggedTimestamps("second"))
    first.insert(1, 2)
    second.insert(1, 2)
    assert first.render() == DUMP_HEADER + "\n1; 2| first\n\n"
    assert second._index[1].render() == "1; 2| second"

    sink = EventMux()
    logged = LruMap(1, timestamps=_TaggedTimestamps("t"), events=LogEventAll(sink=sink))
    logged.insert("a", 1)
    assert sink.dump() == [("Insert", "a; 1| t")]


def test_exclusive_locking_attaches_a_mutex():
    cache = LruMap(2, locking=LockExclusive())
    assert hasattr(cache, "_mutex")
    with cache._mutex:
        pass


def test_event_policies_route_to_sink():
    overflow_sink, all_sink = EventMux(), EventMux()
    only_overflow = LruMap(1, events=LogEventOverflow(sink=overflow_sink))
    everything = LruMap(1, events=LogEventAll(sink=all_sink))
    for cache in (only_overflow, everything):
        cache.insert(1, 5)
        cache.insert(2, 10)
        cache.find(2)
        cache.erase(2)
    assert overflow_sink.dump() == [("Overflow", "1; 5")]
    assert all_sink.events() == ["Insert", "Insert", "Overflow", "Find", "Erase"]


@pytest.mark.parametrize(
    "kind,name,cls",
    [
        ("locking", "none", LockNone),
        ("locking", "exclusive", LockExclusive),
        ("timestamps", "none", TimestampNone),
        ("timestamps", "all", TimestampAll),
        ("hit_count", "disabled", HitCountDisabled),
        ("hit_count", "enabled", HitCountEnabled),
        ("events", "none", LogEventNone),
        ("events", "overflow", LogEventOverflow),
        ("events", "all", LogEventAll),
    ],
)
def test_resolve_policy_by_name(kind, name, cls):
    assert isinstance(resolve_policy(kind, name), cls)


def test_resolve_policy_rejects_unknown_names():
    with pytest.raises(PolicyError):
        resolve_policy("locking", "shared")
    with pytest.raises(PolicyError):
        resolve_policy("compression", "none")
