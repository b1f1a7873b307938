"""Dispatcher that ships accumulated records to the ingestion API."""

import logging
from collections.abc import Sequence

from metricshipper.core.encoding.wire import METRIC_COUNT_LIMIT, build_batch, chunked
from metricshipper.core.errors import MetricDeliveryError, MetricValidationError
from metricshipper.core.models import MetricRecord, Observation
from metricshipper.core.ports import LoggerPort, TransportPort


class MetricDispatcher:
    """Encodes records into wire batches and submits them one at a time.

    Records are split into chunks of at most ``max_batch_size`` entries.
    Chunks are sent strictly in order; the next chunk is not started until
    the previous transport call has returned. The first failure aborts the
    remaining chunks.

    Example:
        ```python
        dispatcher = MetricDispatcher("my-service", transport=InMemoryTransport())
        await dispatcher.send_metrics(collector.get_metrics())
        ```
    """

    def __init__(
        self,
        service_namespace: str,
        transport: TransportPort | None = None,
        logger: LoggerPort | None = None,
        max_batch_size: int = METRIC_COUNT_LIMIT,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            service_namespace: Namespace every batch is published under.
            transport: Transport adapter. Defaults to CloudWatchTransport.
            logger: Logger for batch and failure reporting. Defaults to the
                module logger.
            max_batch_size: Maximum entries per transport call (default 20).

        Raises:
            MetricValidationError: If service_namespace is missing or
                max_batch_size is not a positive integer.
        """
        if not service_namespace:
            raise MetricValidationError("service_namespace is required")
        if (
            isinstance(max_batch_size, bool)
            or not isinstance(max_batch_size, int)
            or max_batch_size < 1
        ):
            raise MetricValidationError("max_batch_size must be a positive integer")
        self.service_namespace = service_namespace
        if transport is None:
            from metricshipper.adapters.transports.cloudwatch import (
                CloudWatchTransport,
            )

            transport = CloudWatchTransport()
        self.transport = transport
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.max_batch_size = max_batch_size

    async def send_metrics(
        self,
        records: MetricRecord | Observation | Sequence[MetricRecord | Observation],
    ) -> None:
        """Send records to the transport in sequential chunks.

        Args:
            records: A single record or an ordered sequence of records.

        Raises:
            MetricDeliveryError: If the transport rejects a chunk. The error
                has already been logged (``logged`` is True) and wraps the
                transport's exception.
        """
        if isinstance(records, (MetricRecord, Observation)):
            records = [records]

        for chunk in chunked(records, self.max_batch_size):
            batch = build_batch(self.service_namespace, chunk)

            debug = getattr(self.logger, "debug", None)
            if callable(debug):
                debug("sending metrics", extra={"metrics": batch})

            try:
                await self.transport.put_metric_data(batch)
            except Exception as e:
                self.logger.error(
                    "failed to send metrics",
                    exc_info=e,
                    extra={"metrics": batch},
                )
                raise MetricDeliveryError(e, batch, logged=True) from e
