import pytest

from docsync.domain.stream_event import StreamEvent
from docsync.exceptions import StreamAlreadyTerminatedError, StreamStateError
from docsync.services.stream_aggregator import StreamAggregator, StreamState, aggregate_stream


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def _started(interval=2.0, clock=None):
    clock = clock or FakeClock()
    flushed = []
    aggregator = StreamAggregator(interval_seconds=interval, clock=clock)
    aggregator.start(flushed.append)
    return aggregator, flushed, clock


def test_flushes_when_interval_elapses():
    aggregator, flushed, clock = _started()
    aggregator.feed("a")
    clock.now = 1.0
    aggregator.feed("b")
    assert flushed == []
    clock.now = 2.5
    aggregator.feed("c")
    assert flushed == ["abc"]
    clock.now = 3.0
    aggregator.feed("d")
    assert aggregator.signal_terminal() == "abcd"
    assert flushed == ["abc", "d"]


def test_flushed_chunks_concatenate_to_full_stream():
    aggregator, flushed, clock = _started(interval=1.0)
    fragments = ["Hel", "lo", ", ", "wor", "ld", "!"]
    for i, fragment in enumerate(fragments):
        clock.now = i * 0.7
        aggregator.feed(fragment)
    result = aggregator.signal_terminal()
    assert result == "Hello, world!"
    assert "".join(flushed) == result
    assert len(flushed) > 1


def test_terminal_fragment_flushes_immediately():
    aggregator, flushed, _ = _started(interval=60)
    aggregator.feed("x", terminal=True)
    assert flushed == ["x"]
    assert aggregator.state is StreamState.STREAMING


def test_nothing_pending_means_no_flush():
    aggregator, flushed, clock = _started()
    clock.now = 10
    aggregator.feed("")
    aggregator.feed(None)
    assert aggregator.signal_terminal() == ""
    assert flushed == []
    assert aggregator.flush_count == 0


def test_zero_interval_flushes_every_fragment():
    aggregator, flushed, _ = _started(interval=0)
    for fragment in ["a", "b", "c"]:
        aggregator.feed(fragment)
    aggregator.signal_terminal()
    assert flushed == ["a", "b", "c"]


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        StreamAggregator(interval_seconds=-1)


def test_feed_after_terminal_raises():
    aggregator, _, _ = _started()
    aggregator.signal_terminal()
    assert aggregator.state is StreamState.TERMINATED
    with pytest.raises(StreamAlreadyTerminatedError):
        aggregator.feed("late")
    with pytest.raises(StreamAlreadyTerminatedError):
        aggregator.signal_terminal()


def test_start_after_terminal_raises():
    aggregator, _, _ = _started()
    aggregator.signal_terminal()
    with pytest.raises(StreamAlreadyTerminatedError):
        aggregator.start(lambda text: None)


def test_use_before_start_raises():
    aggregator = StreamAggregator(clock=FakeClock())
    with pytest.raises(StreamStateError):
        aggregator.feed("a")
    with pytest.raises(StreamStateError):
        aggregator.signal_terminal()


def test_start_twice_raises():
    aggregator, _, _ = _started()
    with pytest.raises(StreamStateError):
        aggregator.start(lambda text: None)


def test_non_callable_sink_rejected():
    aggregator = StreamAggregator(clock=FakeClock())
    with pytest.raises(TypeError):
        aggregator.start("not a sink")


def test_failing_sink_keeps_pending_content():
    received = []
    calls = {"n": 0}

    def sink(text):
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("socket closed")
        received.append(text)

    aggregator = StreamAggregator(interval_seconds=60, clock=FakeClock())
    aggregator.start(sink)
    with pytest.raises(RuntimeError):
        aggregator.feed("a", terminal=True)
    aggregator.feed("b")
    assert aggregator.signal_terminal() == "ab"
    assert received == ["ab"]


def test_aggregate_stream_collects_events():
    clock = FakeClock()
    flushed = []

    def events():
        yield StreamEvent("Hi")
        clock.now = 3
        yield StreamEvent(None)
        yield StreamEvent(" there")
        yield StreamEvent("", finish_reason="stop")

    result = aggregate_stream(events(), flushed.append, interval_seconds=2.0, clock=clock)
    assert result == "Hi there"
    assert flushed == ["Hi", " there"]


def test_aggregate_stream_flushes_received_content_when_source_fails():
    flushed = []

    def events():
        yield StreamEvent("partial")
        raise ConnectionError("upstream dropped")

    with pytest.raises(ConnectionError):
        aggregate_stream(events(), flushed.append, interval_seconds=60, clock=FakeClock())
    assert flushed == ["partial"]
