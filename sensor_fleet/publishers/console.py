"""Console publisher - prints every message to stdout.

Useful for demos and for running the simulator without a broker.
"""

from __future__ import annotations

import sys
from typing import IO

from sensor_fleet.publishers.base import Publisher

__all__ = ["ConsolePublisher"]


class ConsolePublisher(Publisher):
    """Writes ``<channel> <message>`` lines to a stream (stdout by default)."""

    def __init__(self, *, stream: IO[str] | None = None) -> None:
        self._stream = stream or sys.stdout

    async def connect(self) -> None:
        """No-op - stdout is always available."""

    async def publish(self, channel: str, message: str) -> None:
        self._stream.write(f"{channel} {message}\n")
        self._stream.flush()

    async def close(self) -> None:
        """No-op - we do not own stdout."""
