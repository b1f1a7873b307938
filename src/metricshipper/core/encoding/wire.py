"""Encoder for the PutMetricData wire shape."""

import json
from collections.abc import Iterator, Sequence
from datetime import datetime
from typing import Any, TypeVar

from metricshipper.core.models import (
    MetricBatch,
    MetricDatum,
    MetricRecord,
    Observation,
    StatisticSet,
)

METRIC_COUNT_LIMIT = 20

T = TypeVar("T")


def statistic_set(samples: Sequence[float]) -> StatisticSet:
    """Summarise samples as a statistic set.

    Args:
        samples: Non-empty sequence of numeric samples.

    Returns:
        StatisticSet with Maximum, Minimum, SampleCount and Sum.
    """
    return {
        "Maximum": max(samples),
        "Minimum": min(samples),
        "SampleCount": len(samples),
        "Sum": sum(samples),
    }


def encode_record(record: MetricRecord | Observation) -> MetricDatum:
    """Encode one record as a wire entry.

    A record holding more than one sample becomes ``StatisticValues``;
    a single sample becomes ``Value``. ``Timestamp`` and ``Unit`` are
    only present when the record carries them.

    Args:
        record: Accumulated record, or a raw observation.

    Returns:
        MetricDatum ready to be placed in a batch.
    """
    datum: MetricDatum = {
        "MetricName": record.name,
        "Dimensions": [
            {"Name": name, "Value": value} for name, value in record.dimensions.items()
        ],
    }

    if record.timestamp is not None:
        datum["Timestamp"] = record.timestamp

    samples = record.samples
    if len(samples) > 1:
        datum["StatisticValues"] = statistic_set(samples)
    else:
        datum["Value"] = samples[0]

    if record.unit is not None:
        datum["Unit"] = record.unit.value

    return datum


def chunked(items: Sequence[T], size: int = METRIC_COUNT_LIMIT) -> Iterator[list[T]]:
    """Yield consecutive chunks of at most ``size`` items, in order."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def build_batch(
    namespace: str, records: Sequence[MetricRecord | Observation]
) -> MetricBatch:
    """Assemble a wire batch for one chunk of records."""
    return {
        "Namespace": namespace,
        "MetricData": [encode_record(record) for record in records],
    }


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_batch_json(batch: MetricBatch) -> str:
    """Encode a batch as a JSON document.

    Timestamps are written as ISO-8601 strings.
    """
    return json.dumps(batch, default=_json_default)
