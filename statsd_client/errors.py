"""Exceptions raised by the StatsD client."""


class StatsdError(Exception):
    """Base class for client errors. Transport failures are raised as-is."""


class ClientClosedError(StatsdError):
    """Raised by a strict client when it is used after ``close``."""
