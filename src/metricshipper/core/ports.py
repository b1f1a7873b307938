"""Port interfaces for transport and logging collaborators.

These protocols define the contracts that adapters must implement.
The core depends only on these interfaces, not concrete implementations.
"""

from typing import Any, Protocol, runtime_checkable

from metricshipper.core.models import MetricBatch


@runtime_checkable
class TransportPort(Protocol):
    """Port for delivering one wire batch to the ingestion API.

    Adapters implementing this protocol submit a batch and either return
    normally or raise. Examples: InMemoryTransport, HttpTransport,
    CloudWatchTransport.
    """

    async def put_metric_data(self, batch: MetricBatch) -> None:
        """Submit a batch of at most ``max_batch_size`` metric entries.

        Raises:
            Exception: Any transport failure. The core does not interpret
                it beyond logging and forwarding.
        """
        ...


@runtime_checkable
class LoggerPort(Protocol):
    """Minimal logger capability used by the dispatcher.

    A stdlib ``logging.Logger`` satisfies it. ``debug`` is optional at
    runtime; it is called only when present.
    """

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
