"""Common data models for the sensor fleet simulator.

Defines the measurement kinds, the immutable ``SensorIdentity`` each
publisher is bound to, and the ``Reading`` value object that is serialised
onto the wire every tick.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel

__all__ = ["DEFAULT_KINDS", "MeasurementKind", "Reading", "SensorIdentity", "channel_for"]


class MeasurementKind(StrEnum):
    """Reading categories; each kind is also the name of its channel."""

    TEMPERATURE = "temperature"
    PRESSURE = "pressure"
    HUMIDITY = "humidity"


# Order matters: sensor ``i`` is assigned ``DEFAULT_KINDS[i % 3]``.
DEFAULT_KINDS: tuple[str, ...] = (
    MeasurementKind.TEMPERATURE.value,
    MeasurementKind.PRESSURE.value,
    MeasurementKind.HUMIDITY.value,
)


def channel_for(index: int, kinds: Sequence[str] = DEFAULT_KINDS) -> str:
    """Return the channel (measurement kind) assigned to sensor *index*."""
    return kinds[index % len(kinds)]


class SensorIdentity(BaseModel):
    """Numeric index plus the measurement kind derived from it.

    Attributes:
        index: Position of the sensor in the fleet (``0 .. sensor_count-1``).
        kind: Measurement kind, also used as the publish channel.
    """

    model_config = {"frozen": True}

    index: int
    kind: str

    @classmethod
    def from_index(cls, index: int, kinds: Sequence[str] = DEFAULT_KINDS) -> SensorIdentity:
        return cls(index=index, kind=channel_for(index, kinds))

    @property
    def channel(self) -> str:
        return self.kind

    @property
    def short_name(self) -> str:
        """``sensor_007`` style identifier."""
        return f"sensor_{self.index:03d}"

    @property
    def name(self) -> str:
        """``temperature:sensor_007`` style identifier used on the wire."""
        return f"{self.kind}:{self.short_name}"


class Reading(BaseModel):
    """A single reading produced by one sensor tick.

    Attributes:
        sensor_id: ``<kind>:sensor_%03d``.
        channel: Channel the reading is published on (equals the kind).
        timestamp: ISO-8601 UTC timestamp of when the value was generated.
        value: The simulated measurement.
    """

    sensor_id: str
    channel: str
    timestamp: str
    value: float

    @classmethod
    def create(cls, identity: SensorIdentity, value: float) -> Reading:
        """Build a reading for *identity* stamped with the current time."""
        return cls(
            sensor_id=identity.name,
            channel=identity.channel,
            timestamp=datetime.now(timezone.utc).isoformat(),
            value=value,
        )

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    def to_wire(self) -> str:
        """Return the published message, e.g. ``temperature:sensor_000=27.512301``."""
        return f"{self.sensor_id}={self.value:f}"

    @classmethod
    def from_wire(cls, channel: str, message: str | bytes) -> Reading:
        """Decode a wire message received on *channel*.

        The wire format carries no timestamp, so the decode time is used.

        Raises:
            ValueError: If *message* is not ``<sensor_id>=<value>``.
        """
        if isinstance(message, bytes):
            message = message.decode("utf-8")
        sensor_id, sep, raw_value = message.rpartition("=")
        if not sep or not sensor_id:
            raise ValueError(f"Malformed sensor message: {message!r}")
        return cls(
            sensor_id=sensor_id,
            channel=channel,
            timestamp=datetime.now(timezone.utc).isoformat(),
            value=float(raw_value),
        )

    @property
    def short_name(self) -> str:
        """The ``sensor_%03d`` part of :attr:`sensor_id`."""
        return self.sensor_id.rpartition(":")[2]
