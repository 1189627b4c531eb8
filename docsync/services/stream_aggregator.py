"""Time-boxed aggregation of an incrementally arriving text stream.

Fragments are buffered and handed to a sink either when the flush interval
has elapsed or when a terminal fragment arrives. Every fragment reaches the
sink exactly once, in arrival order.
"""
import logging
import time
from enum import Enum
from typing import Callable, Iterable, Optional

from docsync.domain.stream_buffer import StreamBuffer
from docsync.domain.stream_event import StreamEvent
from docsync.exceptions import StreamAlreadyTerminatedError, StreamStateError

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_INTERVAL_SECONDS = 2.0


class StreamState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    TERMINATED = "terminated"


class StreamAggregator:
    """Buffers one stream and flushes it to a sink on an interval or a terminal event.

    One instance handles exactly one stream. The flush timer reads `clock`,
    which must be monotonic (the default is `time.monotonic`).
    """

    def __init__(
        self,
        interval_seconds: float = DEFAULT_FLUSH_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        self.interval_seconds = float(interval_seconds)
        self._clock = clock
        self._state = StreamState.IDLE
        self._sink: Optional[Callable[[str], None]] = None
        self._buffer: Optional[StreamBuffer] = None
        self._last_flush = 0.0
        self.flush_count = 0

    @property
    def state(self) -> StreamState:
        return self._state

    def start(self, sink: Callable[[str], None]) -> None:
        if not callable(sink):
            raise TypeError("sink must be callable")
        if self._state is StreamState.TERMINATED:
            raise StreamAlreadyTerminatedError()
        if self._state is StreamState.STREAMING:
            raise StreamStateError("stream already started")
        self._sink = sink
        self._buffer = StreamBuffer()
        self._last_flush = self._clock()
        self._state = StreamState.STREAMING

    def _require_streaming(self) -> None:
        if self._state is StreamState.TERMINATED:
            raise StreamAlreadyTerminatedError()
        if self._state is StreamState.IDLE:
            raise StreamStateError("stream not started")

    def _flush(self) -> None:
        if not self._buffer.has_pending():
            return
        pending = self._buffer.pending_since_last_flush
        # Pending content is only cleared once the sink has accepted it.
        self._sink(pending)
        self._buffer.clear_pending()
        self._last_flush = self._clock()
        self.flush_count += 1

    def feed(self, fragment: Optional[str], terminal: bool = False) -> None:
        """Buffer `fragment` and flush if the interval elapsed or `terminal` is set."""
        self._require_streaming()
        if fragment:
            self._buffer.append(fragment)
        if terminal or (self._clock() - self._last_flush) >= self.interval_seconds:
            self._flush()

    def signal_terminal(self) -> str:
        """Flush anything pending, end the stream and return everything received."""
        self._require_streaming()
        self._flush()
        self._state = StreamState.TERMINATED
        accumulated = self._buffer.accumulated_all
        self._buffer = None
        self._sink = None
        logger.debug("Stream terminated after %d flushes, %d chars", self.flush_count, len(accumulated))
        return accumulated


def aggregate_stream(
    events: Iterable[StreamEvent],
    sink: Callable[[str], None],
    interval_seconds: float = DEFAULT_FLUSH_INTERVAL_SECONDS,
    clock: Callable[[], float] = time.monotonic,
) -> str:
    """Drive a StreamAggregator over `events` and return the full text.

    If the event source fails, whatever was received is flushed to the sink
    before the error propagates.
    """
    aggregator = StreamAggregator(interval_seconds=interval_seconds, clock=clock)
    aggregator.start(sink)
    iterator = iter(events)
    while True:
        try:
            event = next(iterator)
        except StopIteration:
            break
        except Exception:
            aggregator.signal_terminal()
            raise
        aggregator.feed(event.content, terminal=event.is_terminal)
    return aggregator.signal_terminal()
