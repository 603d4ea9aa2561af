from lrumap import LogEventAll, LruMap
from lrumap.engine.util.logmux import EVENT_MUX, EventMux, dispatch, flush, use_mux


def test_mux_buffers_when_active_and_sink_is_bypassed():
    seen = []
    sink = lambda event, rendered: seen.append((event, rendered))  # noqa: E731

    mux = EventMux()
    with use_mux(mux):
        dispatch(sink, "Insert", "1; 5")
        dispatch(sink, "Find", "1; 5")
        pairs = mux.dump()
        assert pairs == [("Insert", "1; 5"), ("Find", "1; 5")]
        assert seen == []

    # After context exit, the active mux should be cleared
    assert EVENT_MUX.get() is None


def test_dispatch_writes_through_when_inactive():
    seen = []
    dispatch(lambda e, r: seen.append((e, r)), "Erase", "2; 10")
    assert seen == [("Erase", "2; 10")]


def test_flush_replays_in_order():
    mux = EventMux()
    with use_mux(mux):
        dispatch(lambda e, r: None, "Insert", "a; 1")
        dispatch(lambda e, r: None, "Overflow", "b; 2")
    replayed = []
    flush(mux.dump(), lambda e, r: replayed.append(e))
    assert replayed == ["Insert", "Overflow"]
    mux.clear()
    assert len(mux) == 0


def test_cache_events_can_be_captured_around_calls():
    sink = EventMux()
    cache = LruMap(1, events=LogEventAll(sink=sink))
    capture = EventMux()
    with use_mux(capture):
        cache.insert(0, 0)
        cache.insert(1, 5)  # evicts 0
    assert capture.events() == ["Insert", "Insert", "Overflow"]
    assert sink.dump() == []
    # Outside the context the policy's own sink receives events again
    cache.find(1)
    assert sink.dump() == [("Find", "1; 5")]
