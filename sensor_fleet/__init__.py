"""Sensor Fleet Simulator - a fleet of independent simulated sensors, each
publishing readings to a pub/sub channel at a randomized, drifting rate.

Quick start::

    from sensor_fleet import RuntimeParameters, SimulationSupervisor
    from sensor_fleet.publishers import ConsolePublisher

    params = RuntimeParameters(sensor_count=10, min_rate=1.0, max_rate=4.0)
    SimulationSupervisor(params, ConsolePublisher()).run(duration_s=10)
"""

from __future__ import annotations

from sensor_fleet.config import ConfigurationError, RuntimeParameters
from sensor_fleet.generators import RateGenerator, ValueGenerator
from sensor_fleet.models import DEFAULT_KINDS, MeasurementKind, Reading, SensorIdentity
from sensor_fleet.publisher import SensorPublisher, SensorState
from sensor_fleet.supervisor import SimulationSupervisor

__all__ = [
    "DEFAULT_KINDS",
    "ConfigurationError",
    "MeasurementKind",
    "RateGenerator",
    "Reading",
    "RuntimeParameters",
    "SensorIdentity",
    "SensorPublisher",
    "SensorState",
    "SimulationSupervisor",
    "ValueGenerator",
]

__version__ = "0.1.0"
