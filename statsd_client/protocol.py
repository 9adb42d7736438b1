"""StatsD line protocol — metric type tags and the single-line encoder.

A metric line looks like::

    <prefix><name>:<value>|<type>[|@<rate>]\\n

The rate suffix is only written when the rate differs from 1. Names and
values are written as given; callers must keep them free of ``:``, ``|``,
``@`` and newlines.
"""

from statsd_client.values import floating

COUNT = "c"
GAUGE = "g"
UNIQUE = "s"
SET = UNIQUE
TIME = "ms"
HISTOGRAM = "h"

METRIC_TYPES = (COUNT, GAUGE, UNIQUE, TIME, HISTOGRAM)

_RATE_SEP = b"|@"


def is_negative(value: str) -> bool:
    """True for a value string like ``-10`` (a lone ``-`` does not count)."""
    return len(value) > 1 and value[0] == "-"


def append_metric(buf: bytearray, prefix: str, name: str, value: str, typ: str,
                  rate: float = 1.0) -> bytearray:
    """Append one encoded metric line to *buf* in place and return it."""
    buf += prefix.encode("utf-8")
    buf += name.encode("utf-8")
    buf += b":"
    buf += value.encode("utf-8")
    buf += b"|"
    buf += typ.encode("utf-8")

    if rate != 1:
        buf += _RATE_SEP
        buf += floating(rate).encode("utf-8")

    buf += b"\n"
    return buf


def encode_metric(prefix: str, name: str, value: str, typ: str, rate: float = 1.0) -> bytes:
    """Encode every line a single write produces.

    A negative gauge can't be set directly, so it is preceded by a line that
    resets the gauge to zero.
    """
    buf = bytearray()
    if typ == GAUGE and is_negative(value):
        append_metric(buf, prefix, name, "0", GAUGE, rate)
    append_metric(buf, prefix, name, value, typ, rate)
    return bytes(buf)
