"""In-memory transport adapter."""

from metricshipper.core.models import MetricBatch


class InMemoryTransport:
    """In-memory implementation of TransportPort.

    Records every submitted batch in a list. Suitable for testing and
    local development where no ingestion API is reachable.

    Args:
        fail_on: Zero-based call index at which to raise ``error`` instead
            of recording the batch. None never fails.
        error: Exception raised on the failing call.
    """

    def __init__(
        self,
        fail_on: int | None = None,
        error: Exception | None = None,
    ) -> None:
        self.batches: list[MetricBatch] = []
        self.calls = 0
        self._fail_on = fail_on
        self._error = error or RuntimeError("transport failure")

    async def put_metric_data(self, batch: MetricBatch) -> None:
        """Record the batch, or raise if this is the configured failing call."""
        call = self.calls
        self.calls += 1
        if self._fail_on is not None and call == self._fail_on:
            raise self._error
        self.batches.append(batch)

    async def aclose(self) -> None:
        """Nothing to release."""
