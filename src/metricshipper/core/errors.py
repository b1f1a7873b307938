"""Error types raised by metricshipper."""

from typing import Any


class MetricShipperError(Exception):
    """Base class for all metricshipper errors."""


class MetricValidationError(MetricShipperError, ValueError):
    """Raised synchronously when a caller passes malformed input.

    Covers missing construction parameters (e.g. service_namespace) and
    missing or malformed observations.
    """


class MetricDeliveryError(MetricShipperError):
    """Raised when the transport fails to accept a metric batch.

    Attributes:
        error: The exception raised by the transport (also ``__cause__``).
        batch: The wire batch that could not be delivered.
        logged: True once the failure has been written to a logger, so
            callers further up do not report it a second time.
    """

    def __init__(
        self,
        error: BaseException,
        batch: dict[str, Any],
        logged: bool = False,
    ) -> None:
        super().__init__(f"failed to send metrics: {error!s}")
        self.error = error
        self.batch = batch
        self.logged = logged
