"""Builds a publisher from the ``publisher:`` section of a config file::

    publisher:
      type: redis
      url: redis://localhost:6379/0

Every key other than ``type`` is passed to the publisher's constructor and
must name one of its keyword parameters.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Any

from sensor_fleet.config import ConfigurationError
from sensor_fleet.publishers.base import Publisher

__all__ = ["PUBLISHER_TYPES", "create_publisher", "publisher_class", "publisher_options", "register_publisher"]

logger = logging.getLogger("sensor_fleet.publishers.factory")

# ``type`` value -> "module:Class"; imported on first use so optional extras stay optional.
PUBLISHER_TYPES: dict[str, str] = {
    "redis": "sensor_fleet.publishers.redis:RedisPublisher",
    "kafka": "sensor_fleet.publishers.kafka:KafkaPublisher",
    "console": "sensor_fleet.publishers.console:ConsolePublisher",
    "callback": "sensor_fleet.publishers.callback:CallbackPublisher",
}

_OPTION_KINDS = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)


def publisher_class(type_name: str) -> type[Publisher]:
    """Import and return the class registered under *type_name*."""
    target = PUBLISHER_TYPES.get(type_name.lower().strip())
    if target is None:
        raise ConfigurationError(
            f"unknown publisher type {type_name!r} (choose from {', '.join(sorted(PUBLISHER_TYPES))})"
        )
    module_path, _, class_name = target.partition(":")
    return getattr(importlib.import_module(module_path), class_name)


def publisher_options(cls: type[Publisher]) -> list[str]:
    """Constructor keywords a config section may set for *cls*."""
    return [
        name
        for name, param in inspect.signature(cls).parameters.items()
        if param.kind in _OPTION_KINDS
    ]


def create_publisher(config: dict[str, Any]) -> Publisher:
    """Build an unconnected publisher from a ``{"type": ..., **options}`` mapping.

    Raises:
        ConfigurationError: Missing or unknown ``type``, or an option the
            publisher does not accept.
    """
    options = dict(config)
    type_name = options.pop("type", None)
    if not type_name:
        raise ConfigurationError("publisher section needs a 'type' key")

    cls = publisher_class(str(type_name))
    accepted = publisher_options(cls)
    unknown = sorted(set(options) - set(accepted))
    if unknown:
        raise ConfigurationError(
            f"{type_name} publisher does not accept {', '.join(unknown)} "
            f"(accepted: {', '.join(accepted) or 'none'})"
        )

    logger.debug("Creating %s with options %s", cls.__name__, options)
    return cls(**options)


def register_publisher(name: str, module_path: str, class_name: str) -> None:
    """Make ``type: <name>`` resolve to ``module_path.class_name``."""
    PUBLISHER_TYPES[name.lower().strip()] = f"{module_path}:{class_name}"
