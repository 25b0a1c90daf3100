"""Pluggable publishers for the sensor fleet simulator.

Import any publisher you need directly from this package::

    from sensor_fleet.publishers import RedisPublisher, ConsolePublisher
"""

from __future__ import annotations

import importlib
from typing import Any

from sensor_fleet.publishers.base import Publisher
from sensor_fleet.publishers.callback import CallbackPublisher
from sensor_fleet.publishers.console import ConsolePublisher
from sensor_fleet.publishers.redis import RedisPublisher

# KafkaPublisher needs the ``kafka`` extra and is loaded lazily:
#   from sensor_fleet.publishers.kafka import KafkaPublisher

__all__ = [
    "CallbackPublisher",
    "ConsolePublisher",
    "Publisher",
    "RedisPublisher",
]


def __getattr__(name: str) -> Any:
    """Lazy-import publishers that require optional dependencies."""
    _lazy = {
        "KafkaPublisher": "sensor_fleet.publishers.kafka",
    }
    if name in _lazy:
        mod = importlib.import_module(_lazy[name])
        return getattr(mod, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
