"""ASGI middleware that records request metrics into a MetricCollector.

Framework-agnostic: works with any ASGI server (uvicorn, hypercorn, daphne)
and any ASGI framework without extra dependencies.
"""

import fnmatch
import time
from collections.abc import Callable, Coroutine
from typing import Any

from metricshipper.core.collector import MetricCollector
from metricshipper.core.metrics import count, timing

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]


class MetricsMiddleware:
    """ASGI middleware that counts and times HTTP requests.

    For each HTTP request it adds two observations to the collector:
    a Count under ``request_counter_name`` with method, path and status
    dimensions, and a Milliseconds timing under ``request_duration_name``
    with method and path dimensions. Repeated requests to the same route
    merge into the same accumulated record.
    """

    def __init__(
        self,
        app: ASGIApp,
        collector: MetricCollector,
        exclude_paths: list[str] | None = None,
        request_counter_name: str = "http_requests",
        request_duration_name: str = "http_request_duration",
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application to wrap.
            collector: Collector receiving the request observations.
            exclude_paths: Paths to skip. Supports exact matches and
                wildcard patterns (e.g., "/internal/*").
            request_counter_name: Name of the request counter metric.
            request_duration_name: Name of the request duration metric.
        """
        self.app = app
        self.collector = collector
        self.exclude_paths = exclude_paths or []
        self.request_counter_name = request_counter_name
        self.request_duration_name = request_duration_name

    def _path_excluded(self, path: str) -> bool:
        """Check if path matches any pattern in exclude_paths."""
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.exclude_paths)

    def _record(self, scope: Scope, status_code: int, duration: float) -> None:
        method = scope["method"]
        path = scope["path"]
        self.collector.add_metrics(
            [
                count(
                    self.request_counter_name,
                    dimensions={
                        "method": method,
                        "path": path,
                        "status": str(status_code),
                    },
                ),
                timing(
                    self.request_duration_name,
                    duration * 1000,
                    dimensions={"method": method, "path": path},
                ),
            ]
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI callable interface that processes requests through the wrapped app."""
        if scope["type"] != "http" or self._path_excluded(scope["path"]):
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        captured: dict[str, Any] = {"status": None}

        async def wrapped_send(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                captured["status"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, wrapped_send)
        except Exception:
            self._record(scope, 500, time.perf_counter() - start_time)
            raise

        self._record(scope, captured["status"] or 0, time.perf_counter() - start_time)
