"""StatsD client — buffers encoded metric lines and flushes them as UDP packets."""

import functools
import logging
import threading
import time

from statsd_client.errors import ClientClosedError
from statsd_client.protocol import COUNT, GAUGE, HISTOGRAM, TIME, UNIQUE, append_metric, is_negative
from statsd_client.ticker import Ticker
from statsd_client.values import duration, integer, number

logger = logging.getLogger(__name__)

DEFAULT_MAX_PACKET_SIZE = 1193


class StatsdClient:
    """Thread-safe metrics client.

    Lines accumulate in a single buffer until it would exceed
    ``max_packet_size``, until ``flush`` is called, or until the periodic
    ticker started by ``flush_every`` fires. One lock guards the buffer, the
    formatter, the packet size and the ticker.
    """

    def __init__(self, sink, prefix: str = "", max_packet_size: int = DEFAULT_MAX_PACKET_SIZE,
                 formatter=None, flush_interval: float = 0, strict: bool = False):
        self._sink = sink
        self._prefix = prefix
        self._formatter = formatter
        self._max_packet_size = DEFAULT_MAX_PACKET_SIZE
        self._strict = strict

        self._buf = bytearray()
        self._lock = threading.Lock()
        self._closed = threading.Event()
        self._ticker: Ticker | None = None

        self.set_max_packet_size(max_packet_size)
        if flush_interval:
            self.flush_every(flush_interval)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def max_packet_size(self) -> int:
        with self._lock:
            return self._max_packet_size

    @property
    def buffered(self) -> int:
        """Number of bytes waiting to be sent."""
        with self._lock:
            return len(self._buf)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_max_packet_size(self, max_packet_size: int):
        """Change the flush threshold. Buffered lines are sent first."""
        if max_packet_size <= 0:
            return

        with self._lock:
            if self._buf:
                self._flush_locked()
            self._max_packet_size = max_packet_size

    def set_formatter(self, formatter):
        """Install a metric name formatter. Buffered lines are sent first.

        A formatter returning an empty name drops that metric.
        """
        if formatter is None:
            return

        with self._lock:
            if self._buf:
                self._flush_locked()
            self._formatter = formatter

    def flush_every(self, interval: float):
        """Flush everything buffered every *interval* seconds.

        Replaces any previous interval.
        """
        if interval <= 0 or self.is_closed():
            return

        with self._lock:
            # close() may have taken the lock first.
            if self._closed.is_set():
                return
            if self._ticker is not None:
                self._ticker.stop()
            self._ticker = Ticker(interval, self._tick)
            self._ticker.start()
        logger.info("Periodic flush every %.3fs", interval)

    def _tick(self, ticker: Ticker):
        with self._lock:
            # A retired ticker may already be waiting on the lock.
            if ticker.stopped:
                return
            try:
                self._flush_locked()
            except Exception as exc:
                logger.debug("Periodic flush failed: %s", exc)

    # ------------------------------------------------------------------
    # Core write / flush
    # ------------------------------------------------------------------

    def write(self, name: str, value: str, typ: str, rate: float = 1.0):
        """Encode one metric into the buffer, flushing if the packet is full.

        Raises whatever the sink raises when a size-triggered flush fails.
        """
        if self._reject_closed("write"):
            return

        with self._lock:
            # close() may have run between the check above and taking the lock.
            if self._reject_closed("write"):
                return
            if self._formatter is not None:
                name = self._formatter(name)
            if not name:
                return

            if typ == GAUGE and is_negative(value):
                self._append_locked(name, "0", GAUGE, rate)
            self._append_locked(name, value, typ, rate)

    def _append_locked(self, name: str, value: str, typ: str, rate: float):
        """Append one line and flush on overflow. Must be called with self._lock held."""
        n = len(self._buf)
        append_metric(self._buf, self._prefix, name, value, typ, rate)

        if len(self._buf) > self._max_packet_size:
            # Send what was there before this line so it is never split.
            self._flush_locked(n)
            if len(self._buf) > self._max_packet_size:
                self._flush_locked()

    def flush(self, n: int = -1):
        """Send the first *n* buffered bytes (all of them when ``n <= 0``).

        *n* should fall on a line boundary. The last byte of the slice is
        assumed to be a newline and is not sent, so a mid-line *n* loses
        that byte.
        """
        if self._reject_closed("flush"):
            return

        with self._lock:
            if self._reject_closed("flush"):
                return
            self._flush_locked(n)

    def _flush_locked(self, n: int = -1):
        """Write a prefix of the buffer to the sink. Must be called with self._lock held.

        The buffer is only trimmed after the sink accepted the packet.
        """
        if not self._buf:
            return

        if n <= 0 or n > len(self._buf):
            n = len(self._buf)

        # The trailing newline is dropped; each datagram is its own frame.
        self._sink.write(bytes(self._buf[:n - 1]))
        del self._buf[:n]
        logger.debug("Flushed %d bytes, %d remain buffered", n, len(self._buf))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def is_closed(self) -> bool:
        return self._closed.is_set()

    def close(self):
        """Stop the ticker, send what is buffered and close the sink.

        A failed final flush is logged; the sink's close error is raised.
        """
        ticker = None
        try:
            with self._lock:
                ticker, self._ticker = self._ticker, None
                if ticker is not None:
                    ticker.stop()
                try:
                    self._flush_locked()
                except Exception as exc:
                    logger.warning("Final flush failed, %d bytes dropped: %s", len(self._buf), exc)
                finally:
                    self._closed.set()
        finally:
            if ticker is not None:
                ticker.join(timeout=1.0)
            logger.info("StatsD client closed")
            self._sink.close()

    def _reject_closed(self, op: str) -> bool:
        if not self._closed.is_set():
            return False
        if self._strict:
            raise ClientClosedError(f"cannot {op} on a closed client")
        logger.debug("Dropped %s on closed client", op)
        return True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Metric helpers
    # ------------------------------------------------------------------

    def count(self, name: str, value: int):
        self.write(name, integer(value), COUNT, 1)

    def increment(self, name: str):
        self.count(name, 1)

    def decrement(self, name: str):
        self.count(name, -1)

    def gauge(self, name: str, value):
        self.write(name, number(value), GAUGE, 1)

    def unique(self, name: str, value):
        """Add *value* to a set. Strings such as user IDs are sent as given."""
        if not isinstance(value, str):
            value = number(value)
        # Sets have no sampled form.
        self.write(name, value, UNIQUE, 1)

    set = unique

    def time(self, name: str, value):
        """Report a duration (timedelta or seconds) in milliseconds."""
        self.write(name, duration(value), TIME, 1)

    def histogram(self, name: str, value):
        self.write(name, number(value), HISTOGRAM, 1)

    def record(self, name: str, rate: float = 1.0) -> "Stopwatch":
        """Start timing now; ``stop()`` on the result reports the elapsed time."""
        return Stopwatch(self, name, rate)

    def timed(self, name: str, rate: float = 1.0):
        """Decorator that reports how long each call of the function takes."""
        def decorator(func):
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                with self.record(name, rate):
                    return func(*args, **kwargs)
            return wrapper
        return decorator


class Stopwatch:
    """One-shot timer bound to a client and metric name."""

    def __init__(self, client: StatsdClient, name: str, rate: float = 1.0):
        self._client = client
        self._name = name
        self._rate = rate
        self._start = time.monotonic()
        self._stopped = False

    @property
    def elapsed(self) -> float:
        """Seconds since the stopwatch was created."""
        return time.monotonic() - self._start

    def stop(self):
        """Write the elapsed time as a timing metric. Later calls do nothing."""
        if self._stopped:
            return
        self._stopped = True
        self._client.write(self._name, duration(self.elapsed), TIME, self._rate)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()


def is_closed(client: StatsdClient | None) -> bool:
    """Closed check that treats a missing client as closed."""
    return client is None or client.is_closed()
