"""Metric helper functions for creating Observation objects."""

from collections.abc import Sequence
from datetime import UTC, datetime

from metricshipper.core.models import Observation, Unit


def _now() -> datetime:
    return datetime.now(UTC)


def count(
    name: str,
    value: float = 1,
    dimensions: dict[str, str] | None = None,
    timestamp: datetime | None = None,
) -> Observation:
    """Create a counter observation.

    Args:
        name: Metric name (e.g., "eventCount")
        value: Increment value (default: 1)
        dimensions: Optional dimensions
        timestamp: Observation time (default: now, UTC)

    Returns:
        Observation with unit Count
    """
    return Observation(
        name=name,
        value=value,
        dimensions=dimensions or {},
        unit=Unit.COUNT,
        timestamp=timestamp or _now(),
    )


def timing(
    name: str,
    milliseconds: float,
    dimensions: dict[str, str] | None = None,
    timestamp: datetime | None = None,
) -> Observation:
    """Create a duration observation measured in milliseconds.

    Args:
        name: Metric name (e.g., "requestLatency")
        milliseconds: Observed duration
        dimensions: Optional dimensions
        timestamp: Observation time (default: now, UTC)

    Returns:
        Observation with unit Milliseconds
    """
    return Observation(
        name=name,
        value=milliseconds,
        dimensions=dimensions or {},
        unit=Unit.MILLIS,
        timestamp=timestamp or _now(),
    )


def gauge(
    name: str,
    value: float,
    dimensions: dict[str, str] | None = None,
    timestamp: datetime | None = None,
) -> Observation:
    """Create a unitless gauge observation."""
    return Observation(
        name=name,
        value=value,
        dimensions=dimensions or {},
        unit=Unit.NONE,
        timestamp=timestamp or _now(),
    )


def samples(
    name: str,
    values: Sequence[float],
    unit: Unit | None = None,
    dimensions: dict[str, str] | None = None,
    timestamp: datetime | None = None,
) -> Observation:
    """Create a pre-sampled observation from several measured values.

    Args:
        name: Metric name
        values: Non-empty sequence of samples
        unit: Optional unit shared by all samples
        dimensions: Optional dimensions
        timestamp: Observation time (default: now, UTC)

    Returns:
        Observation whose value is the tuple of samples
    """
    return Observation(
        name=name,
        value=tuple(values),
        dimensions=dimensions or {},
        unit=unit,
        timestamp=timestamp or _now(),
    )
