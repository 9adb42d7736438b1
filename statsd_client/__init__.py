"""StatsD client that batches metrics into UDP packets."""

from statsd_client.client import DEFAULT_MAX_PACKET_SIZE, StatsdClient, Stopwatch, is_closed
from statsd_client.errors import ClientClosedError, StatsdError
from statsd_client.protocol import COUNT, GAUGE, HISTOGRAM, SET, TIME, UNIQUE, append_metric, encode_metric
from statsd_client.sink import UDPSink, udp

__all__ = [
    "COUNT",
    "DEFAULT_MAX_PACKET_SIZE",
    "GAUGE",
    "HISTOGRAM",
    "SET",
    "TIME",
    "UNIQUE",
    "ClientClosedError",
    "StatsdClient",
    "StatsdError",
    "Stopwatch",
    "UDPSink",
    "append_metric",
    "encode_metric",
    "is_closed",
    "udp",
]
