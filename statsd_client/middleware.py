"""Flask integration — per-route request counts, timings and response codes."""

from flask import Flask, g, request

from statsd_client.client import StatsdClient

_IGNORED_PATHS = {"/favicon.ico"}


def metric_path(path: str) -> str | None:
    """Turn a URL path into a dotted metric name component.

    ``/`` becomes ``-`` and ``/api/users`` becomes ``api.users``. Returns
    None for paths that should not be measured.
    """
    if path in _IGNORED_PATHS:
        return None
    if len(path) <= 1:
        return "-"
    return path[1:].replace("/", ".")


class StatsdMiddleware:
    """Hooks a Flask app so every request reports three metrics:

    * ``<path>.request``: incremented when the request arrives
    * ``<path>.time``: how long the view took
    * ``<path>.response.<status>``: incremented with the response code
    """

    def __init__(self, app: Flask | None = None, client: StatsdClient | None = None):
        self._client = client
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask):
        app.before_request(self._before_request)
        app.after_request(self._after_request)
        app.extensions["statsd"] = self

    @property
    def client(self) -> StatsdClient | None:
        return self._client

    def _before_request(self):
        path = metric_path(request.path)
        if path is None or self._client is None:
            return None

        self._client.increment(f"{path}.request")
        g.statsd_path = path
        g.statsd_stopwatch = self._client.record(f"{path}.time")
        return None

    def _after_request(self, response):
        stopwatch = g.pop("statsd_stopwatch", None)
        path = g.pop("statsd_path", None)
        if stopwatch is None:
            return response

        stopwatch.stop()
        self._client.increment(f"{path}.response.{response.status_code}")
        return response
