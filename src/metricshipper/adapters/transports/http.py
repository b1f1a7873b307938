"""HTTP transport adapter posting JSON batches with httpx."""

import httpx

from metricshipper.core.encoding.wire import encode_batch_json
from metricshipper.core.models import MetricBatch

_JSON_HEADERS = {"content-type": "application/json"}


class HttpTransport:
    """Delivers batches to an HTTP ingestion endpoint.

    Each batch is POSTed as a JSON document. Non-2xx responses raise
    ``httpx.HTTPStatusError``; connection problems raise the usual
    ``httpx.RequestError`` subclasses. Either one reaches the dispatcher
    unchanged.

    Example:
        ```python
        transport = HttpTransport("https://ingest.example.com/v1/metrics")
        collector = MetricCollector("my-service", transport=transport)
        ```
    """

    def __init__(
        self,
        endpoint: str,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the transport.

        Args:
            endpoint: URL the batches are POSTed to.
            client: Existing client to reuse. When omitted the transport
                creates one and closes it in ``aclose()``.
            headers: Extra request headers (e.g. authentication).
            timeout: Request timeout in seconds for a created client.
        """
        self.endpoint = endpoint
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {**_JSON_HEADERS, **(headers or {})}

    async def put_metric_data(self, batch: MetricBatch) -> None:
        """POST one batch and raise on a non-success response."""
        response = await self._client.post(
            self.endpoint,
            content=encode_batch_json(batch),
            headers=self._headers,
        )
        response.raise_for_status()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
