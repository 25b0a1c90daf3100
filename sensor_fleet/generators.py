"""Per-sensor random generators for emission intervals and reading values.

Each sensor owns one ``random.Random`` instance and hands it to both
generators, so no random state is shared between concurrent sensors.
"""

from __future__ import annotations

import random
import time

__all__ = ["DEFAULT_VALUE_RANGE", "VALUE_RANGES", "RateGenerator", "ValueGenerator", "sensor_rng"]

# Plausible (low, high) value range per measurement kind.
VALUE_RANGES: dict[str, tuple[float, float]] = {
    "temperature": (25.0, 35.0),
    "pressure": (0.8, 1.2),
    "humidity": (70.0, 90.0),
}

DEFAULT_VALUE_RANGE: tuple[float, float] = (0.0, 100.0)


def sensor_rng(index: int, seed: int | None = None) -> random.Random:
    """Create the private random source for sensor *index*.

    With ``seed=None`` the source is seeded from the wall clock plus the
    index; otherwise from ``seed + index`` so runs are reproducible.
    """
    base = time.time_ns() if seed is None else seed
    return random.Random(base + index)


class RateGenerator:
    """Draws emission rates uniformly from ``[min_rate, max_rate]`` Hz.

    Callers are responsible for ``0 < min_rate <= max_rate``; the bounds are
    validated once at startup by :class:`~sensor_fleet.config.RuntimeParameters`.
    """

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def next_rate(self, min_rate: float, max_rate: float) -> float:
        """Return a frequency in Hz."""
        return min_rate + self._rng.random() * (max_rate - min_rate)

    def next_interval(self, min_rate: float, max_rate: float) -> float:
        """Return the time in seconds until the next emission."""
        return 1.0 / self.next_rate(min_rate, max_rate)


class ValueGenerator:
    """Produces a uniformly drawn value inside the range of a measurement kind."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    @staticmethod
    def value_range(kind: str) -> tuple[float, float]:
        return VALUE_RANGES.get(kind, DEFAULT_VALUE_RANGE)

    def next_value(self, kind: str) -> float:
        low, high = self.value_range(kind)
        return low + self._rng.random() * (high - low)
