"""In-process metric collector with a timer-driven flush lifecycle."""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from types import TracebackType
from typing import Any

from metricshipper.core.dispatcher import MetricDispatcher
from metricshipper.core.encoding.wire import METRIC_COUNT_LIMIT
from metricshipper.core.errors import MetricDeliveryError, MetricValidationError
from metricshipper.core.keys import metric_key
from metricshipper.core.models import MetricRecord, Observation, Unit
from metricshipper.core.ports import LoggerPort, TransportPort

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_INTERVAL_MS = 20000


class MetricCollector:
    """Buffers observations and periodically ships them via a dispatcher.

    Observations with the same name and dimension values are merged into a
    single MetricRecord whose samples grow in arrival order. In automatic
    mode a one-shot timer triggers ``flush()``, and each flush arms the next
    timer until ``stop()`` is called. A stopped collector cannot be
    restarted; construct a new one instead.

    Example:
        ```python
        async with MetricCollector(
            service_namespace="my-service", automatic=True
        ) as collector:
            collector.add_metrics(count("eventCount", dimensions={"eventName": "X"}))
        ```
    """

    def __init__(
        self,
        service_namespace: str,
        automatic: bool = False,
        flush_interval_ms: int = DEFAULT_FLUSH_INTERVAL_MS,
        transport: TransportPort | None = None,
        logger: LoggerPort | None = None,
        max_batch_size: int = METRIC_COUNT_LIMIT,
    ) -> None:
        """Initialize the collector.

        Args:
            service_namespace: Namespace metrics are published under.
            automatic: Arm the recurring flush timer immediately. Requires a
                running event loop.
            flush_interval_ms: Delay between automatic flushes (default 20000).
            transport: Transport passed through to the dispatcher.
            logger: Logger passed through to the dispatcher.
            max_batch_size: Maximum entries per transport call (default 20).

        Raises:
            MetricValidationError: If service_namespace is missing or
                flush_interval_ms is not a positive integer.
            RuntimeError: If automatic is set and no event loop is running.
        """
        if not service_namespace:
            raise MetricValidationError("missing service_namespace")
        if (
            isinstance(flush_interval_ms, bool)
            or not isinstance(flush_interval_ms, int)
            or flush_interval_ms <= 0
        ):
            raise MetricValidationError("flush_interval_ms must be a positive integer")

        self.dispatcher = MetricDispatcher(
            service_namespace,
            transport=transport,
            logger=logger,
            max_batch_size=max_batch_size,
        )
        self.automatic = automatic
        self.flush_interval_ms = flush_interval_ms
        self._metrics: dict[str, MetricRecord] = {}
        self._stopped = not automatic
        self._flush_timer: asyncio.TimerHandle | None = None
        self._flush_tasks: set[asyncio.Task[None]] = set()

        if self.automatic:
            self.rearm_flush_timer()

    @property
    def service_namespace(self) -> str:
        return self.dispatcher.service_namespace

    @property
    def stopped(self) -> bool:
        """True once stop() has been called, or if never automatic."""
        return self._stopped

    @property
    def pending_count(self) -> int:
        """Number of accumulated records waiting for the next flush."""
        return len(self._metrics)

    # --- Buffer ---

    def add_metrics(
        self,
        metrics: Observation
        | Mapping[str, Any]
        | Iterable[Observation | Mapping[str, Any]],
    ) -> "MetricCollector":
        """Merge one or more observations into the buffer.

        Args:
            metrics: An Observation (or mapping accepted by
                ``Observation.from_mapping``), or an iterable of them.

        Returns:
            The collector, for chaining.

        Raises:
            MetricValidationError: If metrics is missing or empty, or any
                item is invalid. Nothing is merged when this is raised.
        """
        if metrics is None:
            raise MetricValidationError("missing metrics")

        if isinstance(metrics, (Observation, Mapping)):
            items = [metrics]
        else:
            items = list(metrics)
        if not items:
            raise MetricValidationError("missing metrics")

        observations = [
            item if isinstance(item, Observation) else Observation.from_mapping(item)
            for item in items
        ]

        for observation in observations:
            key = metric_key(observation)
            record = self._metrics.get(key)
            if record is None:
                self._metrics[key] = MetricRecord.from_observation(observation)
            else:
                record.merge(observation)

        return self

    def add_metric(
        self,
        name: str,
        value: float | list[float],
        dimensions: dict[str, str] | None = None,
        unit: Unit | None = None,
        timestamp: datetime | None = None,
    ) -> "MetricCollector":
        """Build a single observation from keyword arguments and add it."""
        return self.add_metrics(
            Observation(
                name=name,
                value=value,
                dimensions=dimensions or {},
                unit=unit,
                timestamp=timestamp,
            )
        )

    def get_metrics(self) -> list[MetricRecord]:
        """Return the accumulated records in insertion order."""
        return list(self._metrics.values())

    def clear_metrics(self) -> "MetricCollector":
        """Discard every accumulated record."""
        self._metrics.clear()
        return self

    # --- Flush lifecycle ---

    def rearm_flush_timer(self) -> None:
        """Replace any pending flush timer with a fresh one-shot timer."""
        if self._flush_timer is not None:
            self._flush_timer.cancel()
        loop = asyncio.get_running_loop()
        self._flush_timer = loop.call_later(
            self.flush_interval_ms / 1000, self._on_flush_timer
        )
        logger.debug(
            "flush timer armed",
            extra={"flush_interval_ms": self.flush_interval_ms},
        )

    def _cancel_flush_timer(self) -> None:
        if self._flush_timer is not None:
            self._flush_timer.cancel()
            self._flush_timer = None

    def _on_flush_timer(self) -> None:
        self._flush_timer = None
        task = asyncio.get_running_loop().create_task(self._timed_flush())
        self._flush_tasks.add(task)
        task.add_done_callback(self._flush_tasks.discard)

    async def _timed_flush(self) -> None:
        """Run a timer-triggered flush; nobody awaits it, so report here."""
        try:
            await self.flush()
        except MetricDeliveryError as e:
            if not e.logged:
                logger.error("automatic flush failed", exc_info=e)
        except Exception:
            logger.exception("automatic flush failed")

    async def flush(self) -> None:
        """Drain the buffer and send its records.

        The buffer is cleared before the transport is contacted, so
        observations added while the send is in flight go into the next
        flush. Records from a failed flush are not requeued.

        Raises:
            MetricDeliveryError: If the transport rejects a batch.
        """
        metrics = self.get_metrics()

        self.clear_metrics()
        if self.automatic and not self._stopped:
            self.rearm_flush_timer()

        if not metrics:
            return

        logger.debug("flushing metrics", extra={"record_count": len(metrics)})
        await self.dispatcher.send_metrics(metrics)

    async def stop(self) -> None:
        """Stop the flush timer and perform one final flush.

        Calling stop() on a stopped collector does nothing. Timer-triggered
        flushes already in flight are awaited before returning; their
        failures are reported by the timer path, not raised here.

        Raises:
            MetricDeliveryError: If the final flush fails.
        """
        if self._stopped:
            return

        self._stopped = True
        self._cancel_flush_timer()
        try:
            await self.flush()
        finally:
            if self._flush_tasks:
                await asyncio.gather(*self._flush_tasks, return_exceptions=True)

    async def __aenter__(self) -> "MetricCollector":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()
