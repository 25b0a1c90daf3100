"""Publisher abstraction - the outbound pub/sub capability shared by every
sensor task.

A single ``Publisher`` instance is created by the caller, connected, handed
to :class:`~sensor_fleet.supervisor.SimulationSupervisor`, and closed by the
caller once the supervisor returns.  Implementations must tolerate many
concurrent ``publish()`` calls; the sensor tasks never serialise access.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

__all__ = ["Publisher"]


class Publisher(ABC):
    """Abstract base class for all publishers.

    Concrete publishers implement ``connect``, ``publish`` and ``close``.
    ``publish`` should raise on failure; the caller logs the error and moves
    on without retrying.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection / open resources."""

    @abstractmethod
    async def publish(self, channel: str, message: str) -> None:
        """Publish one *message* on *channel*."""

    @abstractmethod
    async def close(self) -> None:
        """Release resources / close connections."""
