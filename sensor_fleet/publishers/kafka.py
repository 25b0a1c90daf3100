"""Kafka publisher - sends each channel's messages to its own Kafka topic.

Requires the ``kafka`` extra::

    pip install sensor-fleet-simulator[kafka]
"""

from __future__ import annotations

import logging
from typing import Any

from sensor_fleet.publishers.base import Publisher

__all__ = ["KafkaPublisher"]

logger = logging.getLogger("sensor_fleet.publishers.kafka")

try:
    from aiokafka import AIOKafkaProducer

    KAFKA_AVAILABLE = True
except ImportError:
    KAFKA_AVAILABLE = False


class KafkaPublisher(Publisher):
    """Publish sensor messages to Kafka, one topic per channel.

    Parameters:
        bootstrap_servers: Comma-separated broker addresses.
        topic_prefix: Prepended to the channel name to form the topic
                      (``"sensors."`` gives ``sensors.temperature``).
        compression: ``"snappy"``, ``"gzip"``, ``"lz4"``, ``"zstd"``, or ``None``.
        acks: ``0``, ``1``, or ``"all"`` (``-1``).
        extra_producer_config: Additional kwargs forwarded to
                               ``AIOKafkaProducer``.
    """

    def __init__(
        self,
        *,
        bootstrap_servers: str = "localhost:9092",
        topic_prefix: str = "",
        compression: str | None = None,
        acks: str | int = 1,
        extra_producer_config: dict[str, Any] | None = None,
    ) -> None:
        if not KAFKA_AVAILABLE:
            raise ImportError(
                "aiokafka is required for KafkaPublisher.  Install with: pip install sensor-fleet-simulator[kafka]"
            )
        self._bootstrap_servers = bootstrap_servers
        self._topic_prefix = topic_prefix

        self._producer_config: dict[str, Any] = {
            "bootstrap_servers": bootstrap_servers,
            "compression_type": compression,
            "acks": "all" if acks == -1 else acks,
        }
        if extra_producer_config:
            self._producer_config.update(extra_producer_config)

        self._producer: AIOKafkaProducer | None = None

    def topic_for(self, channel: str) -> str:
        return f"{self._topic_prefix}{channel}"

    async def connect(self) -> None:
        logger.info("Connecting to Kafka at %s ...", self._bootstrap_servers)
        self._producer = AIOKafkaProducer(**self._producer_config)
        await self._producer.start()
        logger.info("Connected to Kafka")

    async def publish(self, channel: str, message: str) -> None:
        if self._producer is None:
            raise RuntimeError("KafkaPublisher is not connected")
        # Broker-side delivery errors surface here, not on send()
        await self._producer.send_and_wait(self.topic_for(channel), value=message.encode())

    async def close(self) -> None:
        if self._producer:
            await self._producer.flush()
            await self._producer.stop()
            self._producer = None
            logger.info("Kafka producer closed")
