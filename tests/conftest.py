"""Shared test fixtures for all test modules."""

import pytest

try:
    import httpx
except ImportError:
    httpx = None

from metricshipper.adapters.transports.in_memory import InMemoryTransport
from metricshipper.core.collector import MetricCollector
from tests.helpers import TEST_SERVICE_NAMESPACE, RecordingLogger


@pytest.fixture
def transport() -> InMemoryTransport:
    """Provide a fresh recording transport."""
    return InMemoryTransport()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger double recording debug and error calls."""
    return RecordingLogger()


@pytest.fixture
def collector(
    transport: InMemoryTransport, recording_logger: RecordingLogger
) -> MetricCollector:
    """Manual (non-automatic) collector wired to the recording transport."""
    return MetricCollector(
        service_namespace=TEST_SERVICE_NAMESPACE,
        transport=transport,
        logger=recording_logger,
    )


# === ASGI Test Fixtures ===


@pytest.fixture
def basic_asgi_app():
    """Basic ASGI app fixture that returns 200 OK."""
    from metricshipper.adapters.frameworks.asgi import Receive, Scope, Send

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        """Simple ASGI app that returns 200 OK."""
        await send({"type": "http.response.start", "status": 200, "headers": []})
        await send({"type": "http.response.body", "body": b"OK"})

    return app


@pytest.fixture
def asgi_scope():
    """Factory fixture for creating ASGI scope dicts."""
    from metricshipper.adapters.frameworks.asgi import Scope

    def _scope(method: str = "GET", path: str = "/test") -> Scope:
        return {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [],
        }

    return _scope


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture."""

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            async with asgi_test_client(app) as client:
                response = await client.get("/endpoint")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
