import socket
import threading

import pytest

from statsd_client.client import StatsdClient


class MemorySink:
    """In-memory sink that records every packet it is asked to send."""

    def __init__(self):
        self.packets: list[bytes] = []
        self.closed = 0
        self.fail_writes = False
        self._lock = threading.Lock()

    def write(self, data: bytes):
        if self.fail_writes:
            raise ConnectionRefusedError("collector unreachable")
        with self._lock:
            self.packets.append(bytes(data))

    def close(self):
        self.closed += 1

    def text(self) -> str:
        with self._lock:
            return "\n".join(p.decode("utf-8") for p in self.packets)


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def client(sink):
    c = StatsdClient(sink, "my_prefix.")
    yield c
    if not c.is_closed():
        c.close()


@pytest.fixture
def udp_receiver():
    """Bind a UDP socket on an ephemeral port and yield (socket, port)."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    _, port = sock.getsockname()
    yield sock, port
    sock.close()
