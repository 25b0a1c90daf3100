"""Redis publisher - sends each message with ``PUBLISH <channel> <message>``.

This is the default publisher.  The ``redis.asyncio`` client keeps a
connection pool, so one instance can be shared by every sensor task.
"""

from __future__ import annotations

import logging
from typing import Any

import redis.asyncio as aioredis

from sensor_fleet.publishers.base import Publisher

__all__ = ["RedisPublisher"]

logger = logging.getLogger("sensor_fleet.publishers.redis")


class RedisPublisher(Publisher):
    """Publish sensor messages to Redis pub/sub channels.

    Parameters:
        url: Redis connection URL, e.g. ``redis://localhost:6379/0``.
        max_connections: Upper bound for the client's connection pool.
        extra_client_config: Additional kwargs forwarded to
                             ``redis.asyncio.Redis.from_url``.
    """

    def __init__(
        self,
        *,
        url: str = "redis://localhost:6379/0",
        max_connections: int | None = None,
        extra_client_config: dict[str, Any] | None = None,
    ) -> None:
        self._url = url
        self._client_config: dict[str, Any] = {}
        if max_connections is not None:
            self._client_config["max_connections"] = max_connections
        if extra_client_config:
            self._client_config.update(extra_client_config)
        self._client: aioredis.Redis | None = None

    async def connect(self) -> None:
        # The client connects lazily; an unreachable broker shows up as
        # per-tick publish errors rather than a startup failure.
        self._client = aioredis.Redis.from_url(self._url, **self._client_config)
        logger.info("Redis client created for %s", self._url)

    async def publish(self, channel: str, message: str) -> None:
        if self._client is None:
            raise RuntimeError("RedisPublisher is not connected")
        await self._client.publish(channel, message)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis client closed")
