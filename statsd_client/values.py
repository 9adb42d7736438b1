"""Value formatters — turn numbers and durations into protocol-safe decimal strings."""

import math
from datetime import timedelta
from decimal import Decimal

_MILLISECOND = timedelta(milliseconds=1)


def integer(v: int) -> str:
    return str(int(v))


def unsigned(v: int) -> str:
    if v < 0:
        raise ValueError(f"unsigned value must be >= 0, got {v}")
    return str(int(v))


def floating(v: float) -> str:
    """Shortest decimal that round-trips *v*, never in exponent notation."""
    v = float(v)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "+Inf" if v > 0 else "-Inf"

    text = format(Decimal(repr(v)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def duration(v) -> str:
    """Milliseconds, truncated toward zero. *v* is a timedelta or seconds."""
    if not isinstance(v, timedelta):
        v = timedelta(seconds=v)
    return str(int(v / _MILLISECOND))


def number(v) -> str:
    if isinstance(v, float):
        return floating(v)
    return integer(v)
