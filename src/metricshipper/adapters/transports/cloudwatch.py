"""AWS CloudWatch transport adapter.

Requires the aiobotocore package. Install with: pip install metricshipper[aws]
"""

import asyncio
from contextlib import AsyncExitStack
from typing import Any

from metricshipper.core.models import MetricBatch

CLOUDWATCH_SERVICE = "cloudwatch"


def _default_session() -> Any:
    try:
        from aiobotocore.session import get_session
    except ImportError as e:
        raise ImportError(
            "aiobotocore is required for CloudWatchTransport. "
            "Install with: pip install metricshipper[aws]"
        ) from e
    return get_session()


class CloudWatchTransport:
    """Implementation of TransportPort backed by CloudWatch PutMetricData.

    The client is created on first use, since constructing an aiobotocore
    client needs a running event loop. Credentials and region follow the
    usual botocore resolution unless given explicitly.
    """

    def __init__(
        self,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        session: Any = None,
    ) -> None:
        """Initialize the transport.

        Args:
            region_name: AWS region. Defaults to botocore's resolution.
            endpoint_url: Custom endpoint (e.g. LocalStack).
            session: aiobotocore session to create the client from.
                Defaults to ``aiobotocore.session.get_session()``.
        """
        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self._session = session
        self._client: Any = None
        self._exit_stack: AsyncExitStack | None = None
        self._init_lock: asyncio.Lock | None = None

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the client lock (lazy to avoid event loop issues)."""
        if self._init_lock is None:
            self._init_lock = asyncio.Lock()
        return self._init_lock

    async def _get_client(self) -> Any:
        """Open the CloudWatch client once."""
        if self._client is not None:
            return self._client
        async with self._get_lock():
            if self._client is not None:
                return self._client
            if self._session is None:
                self._session = _default_session()
            client_config: dict[str, Any] = {}
            if self.region_name:
                client_config["region_name"] = self.region_name
            if self.endpoint_url:
                client_config["endpoint_url"] = self.endpoint_url
            exit_stack = AsyncExitStack()
            self._client = await exit_stack.enter_async_context(
                self._session.create_client(CLOUDWATCH_SERVICE, **client_config)
            )
            self._exit_stack = exit_stack
        return self._client

    async def put_metric_data(self, batch: MetricBatch) -> None:
        """Submit one batch through PutMetricData."""
        client = await self._get_client()
        await client.put_metric_data(
            Namespace=batch["Namespace"],
            MetricData=batch["MetricData"],
        )

    async def aclose(self) -> None:
        """Close the client if one was opened."""
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
            self._exit_stack = None
            self._client = None
