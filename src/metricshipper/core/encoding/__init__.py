"""Wire encoders for metric batches."""

from metricshipper.core.encoding.wire import (
    METRIC_COUNT_LIMIT,
    build_batch,
    chunked,
    encode_batch_json,
    encode_record,
    statistic_set,
)

__all__ = [
    "METRIC_COUNT_LIMIT",
    "build_batch",
    "chunked",
    "encode_batch_json",
    "encode_record",
    "statistic_set",
]
