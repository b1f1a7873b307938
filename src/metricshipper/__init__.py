"""metricshipper: buffer application metrics in memory and ship them in batches."""

from metricshipper.adapters.transports import (
    CloudWatchTransport,
    HttpTransport,
    InMemoryTransport,
)
from metricshipper.core.collector import DEFAULT_FLUSH_INTERVAL_MS, MetricCollector
from metricshipper.core.dispatcher import MetricDispatcher
from metricshipper.core.encoding.wire import METRIC_COUNT_LIMIT
from metricshipper.core.errors import (
    MetricDeliveryError,
    MetricShipperError,
    MetricValidationError,
)
from metricshipper.core.keys import metric_key
from metricshipper.core.metrics import count, gauge, samples, timing
from metricshipper.core.models import MetricRecord, Observation, Unit
from metricshipper.core.ports import LoggerPort, TransportPort

UNITS = Unit

__all__ = [
    "DEFAULT_FLUSH_INTERVAL_MS",
    "METRIC_COUNT_LIMIT",
    "UNITS",
    "CloudWatchTransport",
    "HttpTransport",
    "InMemoryTransport",
    "LoggerPort",
    "MetricCollector",
    "MetricDeliveryError",
    "MetricDispatcher",
    "MetricRecord",
    "MetricShipperError",
    "MetricValidationError",
    "Observation",
    "TransportPort",
    "Unit",
    "count",
    "gauge",
    "metric_key",
    "samples",
    "timing",
]
