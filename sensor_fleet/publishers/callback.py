"""Callback publisher - delegates every publish to a user-provided callable.

Handy for embedding the simulator or capturing messages in tests::

    received = []
    publisher = CallbackPublisher(lambda channel, message: received.append(message))
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable

from sensor_fleet.publishers.base import Publisher

__all__ = ["CallbackPublisher"]


class CallbackPublisher(Publisher):
    """Wraps a ``(channel, message)`` function as a publisher.

    The callable can be a regular function, a coroutine function, or a
    lambda.  Exceptions it raises are treated like broker errors.
    """

    def __init__(self, callback: Callable[[str, str], Any]) -> None:
        self._callback = callback
        self._is_async = inspect.iscoroutinefunction(callback)

    async def connect(self) -> None:
        """No-op."""

    async def publish(self, channel: str, message: str) -> None:
        if self._is_async:
            await self._callback(channel, message)
        else:
            # Run sync callback in executor to avoid blocking the event loop
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._callback, channel, message)

    async def close(self) -> None:
        """No-op."""
