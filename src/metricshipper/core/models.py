"""Core domain models for metric observations and their wire shape."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from numbers import Real
from typing import Any, NotRequired, TypedDict

from metricshipper.core.errors import MetricValidationError


class Unit(str, Enum):
    """Units accepted verbatim by the ingestion API."""

    COUNT = "Count"
    MILLIS = "Milliseconds"
    NONE = "None"


def _check_number(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise MetricValidationError(f"metric value must be a number, got {value!r}")


@dataclass(frozen=True)
class Observation:
    """A single raw measurement supplied by a caller.

    Attributes:
        name: Metric name (e.g., eventCount).
        value: A number, or a non-empty sequence of numbers for a
            pre-sampled observation.
        dimensions: Dimension name to dimension value. Order is kept.
        unit: Optional unit tag.
        timestamp: Optional point in time; not part of the metric identity.
    """

    name: str
    value: float | Sequence[float]
    dimensions: dict[str, str] = field(default_factory=dict)
    unit: Unit | None = None
    timestamp: datetime | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise MetricValidationError("metric name must be a non-empty string")
        if self.dimensions is None:
            object.__setattr__(self, "dimensions", {})
        if not isinstance(self.dimensions, Mapping):
            raise MetricValidationError("metric dimensions must be a mapping")
        for dim_name, dim_value in self.dimensions.items():
            if not isinstance(dim_name, str) or not isinstance(dim_value, str):
                raise MetricValidationError(
                    f"dimension {dim_name!r} must map a string to a string"
                )
        if isinstance(self.value, Sequence) and not isinstance(
            self.value, (str, bytes, bytearray)
        ):
            if len(self.value) == 0:
                raise MetricValidationError(
                    f"metric {self.name!r} has an empty sample sequence"
                )
            for sample in self.value:
                _check_number(sample)
        else:
            _check_number(self.value)
        if self.unit is not None and not isinstance(self.unit, Unit):
            try:
                object.__setattr__(self, "unit", Unit(self.unit))
            except ValueError as e:
                raise MetricValidationError(f"unknown unit {self.unit!r}") from e

    @property
    def samples(self) -> tuple[float, ...]:
        """Return the observed value(s) as a tuple, keeping their numeric type."""
        if isinstance(self.value, Sequence):
            return tuple(self.value)
        return (self.value,)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Observation":
        """Build an observation from a plain mapping.

        Recognised keys: name, value, dimensions, unit, timestamp.
        """
        if "name" not in data or "value" not in data:
            raise MetricValidationError("observation requires 'name' and 'value'")
        return cls(
            name=data["name"],
            value=data["value"],
            dimensions=dict(data.get("dimensions") or {}),
            unit=data.get("unit"),
            timestamp=data.get("timestamp"),
        )


@dataclass
class MetricRecord:
    """All observations merged under one identity key.

    name, dimensions, unit and timestamp come from the first observation;
    values grows with every merged observation.
    """

    name: str
    values: list[float]
    dimensions: dict[str, str] = field(default_factory=dict)
    unit: Unit | None = None
    timestamp: datetime | None = None

    @classmethod
    def from_observation(cls, observation: Observation) -> "MetricRecord":
        return cls(
            name=observation.name,
            values=list(observation.samples),
            dimensions=dict(observation.dimensions),
            unit=observation.unit,
            timestamp=observation.timestamp,
        )

    def merge(self, observation: Observation) -> None:
        """Append the observation's samples, leaving other fields untouched."""
        self.values.extend(observation.samples)

    @property
    def samples(self) -> tuple[float, ...]:
        return tuple(self.values)


# --- Wire shapes ---


class Dimension(TypedDict):
    Name: str
    Value: str


class StatisticSet(TypedDict):
    Maximum: float
    Minimum: float
    SampleCount: int
    Sum: float


class MetricDatum(TypedDict):
    MetricName: str
    Dimensions: list[Dimension]
    Value: NotRequired[float]
    StatisticValues: NotRequired[StatisticSet]
    Timestamp: NotRequired[datetime]
    Unit: NotRequired[str]


class MetricBatch(TypedDict):
    Namespace: str
    MetricData: list[MetricDatum]
