"""UDP sink — a connected datagram socket that sends one packet per write."""

import logging
import socket

logger = logging.getLogger(__name__)

DEFAULT_ADDR = ":8125"


class UDPSink:
    """Fire-and-forget transport for encoded metric packets.

    Any object with ``write(data)`` and ``close()`` can stand in for this
    class; failures are raised, never returned.
    """

    def __init__(self, host: str, port: int):
        self._host = host
        self._port = port
        family, _, _, _, sockaddr = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0]
        self._sock = socket.socket(family, socket.SOCK_DGRAM)
        try:
            self._sock.connect(sockaddr)
        except OSError:
            self._sock.close()
            raise
        self._closed = False
        logger.debug("UDP sink connected to %s:%d", host, port)

    @property
    def address(self) -> tuple[str, int]:
        return self._host, self._port

    def write(self, data: bytes):
        """Send *data* as a single datagram."""
        self._sock.send(data)

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._sock.close()
        logger.debug("UDP sink to %s:%d closed", self._host, self._port)


def parse_addr(addr: str) -> tuple[str, int]:
    """Split ``HOST:PORT`` into its parts. An empty host means localhost."""
    if not addr:
        addr = DEFAULT_ADDR

    host, sep, port = addr.rpartition(":")
    if not sep or not port:
        raise ValueError(f"invalid UDP address {addr!r}, expected HOST:PORT")
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"invalid port in UDP address {addr!r}") from None

    host = host.strip("[]") or "localhost"
    return host, port_num


def udp(addr: str = DEFAULT_ADDR) -> UDPSink:
    """Open a UDP sink for ``HOST:PORT`` (default ``:8125``)."""
    host, port = parse_addr(addr)
    return UDPSink(host, port)
