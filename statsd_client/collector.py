"""Development collector — receives StatsD packets over UDP and keeps the parsed lines."""

import logging
import socket
import threading
from collections import deque
from dataclasses import dataclass

from statsd_client.protocol import METRIC_TYPES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricLine:
    name: str
    value: str
    typ: str
    rate: float = 1.0


def parse_line(line: str) -> MetricLine:
    """Parse ``name:value|type[|@rate]``. Raises ValueError when malformed."""
    name, sep, rest = line.partition(":")
    if not sep or not name:
        raise ValueError(f"missing name in {line!r}")

    parts = rest.split("|")
    if len(parts) < 2 or not parts[0]:
        raise ValueError(f"missing value or type in {line!r}")

    value, typ = parts[0], parts[1]
    if typ not in METRIC_TYPES:
        raise ValueError(f"unknown metric type {typ!r} in {line!r}")

    rate = 1.0
    if len(parts) > 2:
        if len(parts) > 3 or not parts[2].startswith("@"):
            raise ValueError(f"invalid sample rate in {line!r}")
        rate = float(parts[2][1:])

    return MetricLine(name=name, value=value, typ=typ, rate=rate)


class StatsdCollector:
    def __init__(self, host: str, port: int, shutdown_event: threading.Event,
                 buffer_size: int = 65536, max_lines: int = 10000):
        self._host = host
        self._port = port
        self._shutdown = shutdown_event
        self._buffer_size = buffer_size
        self._sock = None
        self._lock = threading.Lock()
        self._lines: deque[MetricLine] = deque(maxlen=max_lines)
        self._packets = 0
        self.server_address = None

    def start(self):
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock.settimeout(0.5)
        self._sock.bind((self._host, self._port))
        self.server_address = self._sock.getsockname()
        logger.info("StatsD collector listening on %s:%d", *self.server_address)

        while not self._shutdown.is_set():
            try:
                data, addr = self._sock.recvfrom(self._buffer_size)
            except socket.timeout:
                continue
            except OSError:
                if self._shutdown.is_set():
                    break
                raise

            self._handle_packet(data, addr)

    def _handle_packet(self, data: bytes, addr):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("Invalid packet from %s: %s", addr, exc)
            return

        parsed = []
        for raw in text.split("\n"):
            if not raw:
                continue
            try:
                parsed.append(parse_line(raw))
            except ValueError as exc:
                logger.warning("Skipping malformed line from %s: %s", addr, exc)

        with self._lock:
            self._packets += 1
            self._lines.extend(parsed)
        logger.debug("Received %d line(s) from %s", len(parsed), addr)

    def stop(self):
        self._shutdown.set()
        if self._sock:
            self._sock.close()
            self._sock = None
        logger.info("StatsD collector stopped after %d packet(s)", self.packet_count)

    def lines(self) -> list[MetricLine]:
        with self._lock:
            return list(self._lines)

    @property
    def packet_count(self) -> int:
        with self._lock:
            return self._packets
