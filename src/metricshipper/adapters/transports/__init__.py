"""Transport adapters implementing TransportPort."""

from metricshipper.adapters.transports.cloudwatch import CloudWatchTransport
from metricshipper.adapters.transports.http import HttpTransport
from metricshipper.adapters.transports.in_memory import InMemoryTransport

__all__ = [
    "CloudWatchTransport",
    "HttpTransport",
    "InMemoryTransport",
]
