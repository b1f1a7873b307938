"""Identity keys for merging observations into accumulated records."""

from metricshipper.core.models import Observation

KEY_SEPARATOR = ":"


def metric_key(observation: Observation) -> str:
    """Return the identity key for an observation.

    The key is the metric name followed by the dimension values in the
    mapping's iteration order, e.g. ``eventCount:X``. Dimension names are
    not part of the key, so ``{"a": "1"}`` and ``{"b": "1"}`` collide.

    Args:
        observation: The observation to identify.

    Returns:
        Key string; ``name:`` when the observation has no dimensions.
    """
    dimension_values = KEY_SEPARATOR.join(observation.dimensions.values())
    return f"{observation.name}{KEY_SEPARATOR}{dimension_values}"
