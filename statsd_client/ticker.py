"""Background ticker that drives periodic flushes."""

import logging
import threading

logger = logging.getLogger(__name__)


class Ticker:
    """Calls ``callback(ticker)`` every *interval* seconds on a daemon thread.

    ``stop`` only signals the thread, so it is safe to call while holding a
    lock the callback also takes.
    """

    def __init__(self, interval: float, callback):
        self._interval = interval
        self._callback = callback
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name="statsd-flush-ticker", daemon=True)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def start(self):
        self._thread.start()

    def stop(self):
        self._stop_event.set()

    def join(self, timeout: float | None = None):
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def _run(self):
        while not self._stop_event.wait(timeout=self._interval):
            self._callback(self)
        logger.debug("Ticker (%.3fs) stopped", self._interval)
