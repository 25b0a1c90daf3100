#!/usr/bin/env python3
"""Redis subscriber example -- run a small fleet and watch its readings arrive.

Requires a Redis server on localhost:6379.  Starts three sensors at 5 Hz,
subscribes to all three channels, decodes each message and prints it, then
stops after a few seconds.

Usage::

    python examples/redis_subscriber_example.py
    python examples/redis_subscriber_example.py --duration 10 --url redis://broker:6379/0
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib


async def _subscribe(url: str, received: list) -> None:
    import redis.asyncio as aioredis

    from sensor_fleet.models import DEFAULT_KINDS, Reading

    client = aioredis.Redis.from_url(url)
    pubsub = client.pubsub()
    await pubsub.subscribe(*DEFAULT_KINDS)
    try:
        async for msg in pubsub.listen():
            if msg["type"] != "message":
                continue
            reading = Reading.from_wire(msg["channel"].decode(), msg["data"])
            received.append(reading)
            print(f"  {reading.channel:<12} {reading.short_name:<12} {reading.value:>10.3f}")
    finally:
        await pubsub.aclose()
        await client.aclose()


async def _main(url: str, duration_s: float) -> None:
    from sensor_fleet import RuntimeParameters, SimulationSupervisor
    from sensor_fleet.publishers import RedisPublisher

    received: list = []
    listener = asyncio.create_task(_subscribe(url, received))

    publisher = RedisPublisher(url=url)
    await publisher.connect()
    try:
        params = RuntimeParameters(sensor_count=3, min_rate=5.0, max_rate=5.0)
        await SimulationSupervisor(params, publisher).run_async(duration_s=duration_s)
    finally:
        await publisher.close()
        listener.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await listener

    print(f"\nReceived {len(received)} readings")


def main() -> None:
    parser = argparse.ArgumentParser(description="Subscribe to a running sensor fleet")
    parser.add_argument("--url", default="redis://localhost:6379/0")
    parser.add_argument("--duration", type=float, default=3.0)
    args = parser.parse_args()

    print("=" * 60)
    print("Sensor fleet -> Redis pub/sub")
    print("=" * 60)
    asyncio.run(_main(args.url, args.duration))


if __name__ == "__main__":
    main()
