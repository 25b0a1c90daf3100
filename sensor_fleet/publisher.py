"""SensorPublisher - the long-lived publish loop of one simulated sensor.

Each tick the sensor sleeps for its current interval, publishes one reading
on its channel, draws a fresh interval and then checks the shared
cancellation event.  The interval is re-randomised every tick, so the
emission rate drifts between ``min_rate`` and ``max_rate`` instead of
holding a fixed period.
"""

from __future__ import annotations

import asyncio
import logging
import random
from enum import StrEnum

from sensor_fleet.generators import RateGenerator, ValueGenerator
from sensor_fleet.models import Reading, SensorIdentity
from sensor_fleet.publishers.base import Publisher

__all__ = ["SensorPublisher", "SensorState"]

logger = logging.getLogger("sensor_fleet.publisher")


class SensorState(StrEnum):
    RUNNING = "running"
    STOPPED = "stopped"


class SensorPublisher:
    """Publishes readings for one :class:`SensorIdentity` until cancelled.

    Parameters:
        identity: Index and measurement kind of the sensor.
        publisher: Shared publish capability.
        min_rate / max_rate: Rate bounds in Hz, already validated.
        cancel_event: Shared shutdown signal, observed once per tick.
        rng: Random source owned by this sensor alone.
    """

    def __init__(
        self,
        identity: SensorIdentity,
        publisher: Publisher,
        *,
        min_rate: float,
        max_rate: float,
        cancel_event: asyncio.Event,
        rng: random.Random,
    ) -> None:
        self.identity = identity
        self._publisher = publisher
        self._min_rate = min_rate
        self._max_rate = max_rate
        self._cancel_event = cancel_event
        self._rates = RateGenerator(rng)
        self._values = ValueGenerator(rng)

        self.state = SensorState.RUNNING
        self.interval = self._rates.next_interval(min_rate, max_rate)
        self.published = 0
        self.failed = 0

    async def run(self) -> None:
        """Tick until the cancellation event is observed."""
        try:
            while self.state is SensorState.RUNNING:
                await asyncio.sleep(self.interval)
                await self.tick()
                self.interval = self._rates.next_interval(self._min_rate, self._max_rate)

                if self._cancel_event.is_set():
                    self.state = SensorState.STOPPED
        finally:
            self.state = SensorState.STOPPED
            logger.debug(
                "%s stopped (published=%d, failed=%d)",
                self.identity.name,
                self.published,
                self.failed,
            )

    async def tick(self) -> Reading:
        """Generate and publish one reading; publish errors are logged, not raised."""
        reading = Reading.create(self.identity, self._values.next_value(self.identity.kind))
        message = reading.to_wire()
        try:
            await self._publisher.publish(reading.channel, message)
        except Exception as exc:
            self.failed += 1
            logger.warning(
                "Error publishing data for %s to channel %s: %s (%s)",
                self.identity.name,
                reading.channel,
                message,
                exc,
            )
        else:
            self.published += 1
            logger.info("Published data for %s to channel %s: %s", self.identity.name, reading.channel, message)
        return reading
