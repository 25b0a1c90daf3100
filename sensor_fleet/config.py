"""Runtime parameters and the YAML config file layered on top of CLI flags.

A config file may set any of the following keys; every key present
overrides the matching command-line flag.  Hyphenated and snake_case
spellings are both accepted::

    num-sensors: 1000        # or sensor_count
    min-rate: 4.0            # Hz
    max-rate: 4.0            # Hz
    kinds: [temperature, pressure, humidity]
    log_level: INFO
    duration_s: 60

    publisher:
      type: redis
      url: redis://localhost:6379/0
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from sensor_fleet.models import DEFAULT_KINDS

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "LOG_LEVELS",
    "ConfigurationError",
    "RuntimeParameters",
    "SimulatorFileConfig",
    "load_yaml_config",
    "resolve_parameters",
]

logger = logging.getLogger("sensor_fleet.config")

# Picked up automatically when no ``--config`` is given.
DEFAULT_CONFIG_PATH = Path("config.yaml")

# Config file spellings that differ from the field names.
_KEY_ALIASES = {
    "num_sensors": "sensor_count",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigurationError(ValueError):
    """Invalid runtime parameters or config file; fatal before any sensor starts."""


class RuntimeParameters(BaseModel):
    """Resolved parameters consumed by the supervisor.

    Attributes:
        sensor_count: How many sensors to simulate.
        min_rate: Lower bound of each sensor's publish rate in Hz.
        max_rate: Upper bound of each sensor's publish rate in Hz.
        kinds: Ordered measurement kinds; sensor ``i`` gets ``kinds[i % len(kinds)]``.
    """

    sensor_count: int = 1000
    min_rate: float = 4.0
    max_rate: float = 4.0
    kinds: tuple[str, ...] = DEFAULT_KINDS

    def validate_bounds(self) -> None:
        """Raise :class:`ConfigurationError` naming the first violated constraint."""
        if self.sensor_count < 0:
            raise ConfigurationError(f"sensor count must be >= 0, got {self.sensor_count}")
        if not (math.isfinite(self.min_rate) and math.isfinite(self.max_rate)):
            raise ConfigurationError(
                f"min-rate and max-rate must be finite numbers (got min-rate={self.min_rate}, max-rate={self.max_rate})"
            )
        if self.min_rate <= 0 or self.max_rate <= 0:
            raise ConfigurationError(
                f"min-rate and max-rate must be greater than 0 (got min-rate={self.min_rate}, max-rate={self.max_rate})"
            )
        if self.min_rate > self.max_rate:
            raise ConfigurationError(
                f"min-rate cannot be greater than max-rate ({self.min_rate} > {self.max_rate})"
            )
        if not self.kinds:
            raise ConfigurationError("at least one measurement kind is required")


class SimulatorFileConfig(BaseModel):
    """Parsed representation of a YAML config file.

    Every field is optional; ``None`` means "not set in the file" so the
    command-line value is kept.
    """

    sensor_count: int | None = None
    min_rate: float | None = None
    max_rate: float | None = None
    kinds: list[str] | None = None
    log_level: str | None = None
    duration_s: float | None = None
    publisher: dict[str, Any] = Field(default_factory=dict)
    source: str | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_log_level(cls, value: Any) -> Any:
        if value is None:
            return None
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level


def load_yaml_config(path: str | Path) -> SimulatorFileConfig:
    """Load a YAML config file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConfigurationError: If the file is not a mapping or holds values of
            the wrong type.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("r") as fh:
            raw = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Error reading config file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping at the top level")

    normalised: dict[str, Any] = {}
    for key, value in raw.items():
        name = str(key).strip().replace("-", "_")
        normalised[_KEY_ALIASES.get(name, name)] = value
    normalised["source"] = str(path)

    try:
        config = SimulatorFileConfig(**normalised)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid value in config file {path}: {exc}") from exc

    logger.info("Using config file: %s", path)
    logger.info("Loaded configuration: %s", config.model_dump(exclude_none=True, exclude={"source"}))
    return config


def resolve_parameters(
    *,
    sensor_count: int,
    min_rate: float,
    max_rate: float,
    config_path: str | Path | None = None,
) -> tuple[RuntimeParameters, SimulatorFileConfig]:
    """Layer the config file over the command-line values and validate.

    When *config_path* is ``None`` the file ``./config.yaml`` is used if it
    exists; otherwise the command-line values stand alone.

    Returns:
        The validated parameters and the file config (empty when no file
        was read) so callers can pick up publisher and logging settings.
    """
    if config_path is not None:
        try:
            file_cfg = load_yaml_config(config_path)
        except FileNotFoundError as exc:
            raise ConfigurationError(str(exc)) from exc
    elif DEFAULT_CONFIG_PATH.exists():
        file_cfg = load_yaml_config(DEFAULT_CONFIG_PATH)
    else:
        logger.info("No config file found, using default values")
        file_cfg = SimulatorFileConfig()

    overrides: dict[str, Any] = {
        "sensor_count": sensor_count,
        "min_rate": min_rate,
        "max_rate": max_rate,
    }
    for key in ("sensor_count", "min_rate", "max_rate", "kinds"):
        value = getattr(file_cfg, key)
        if value is not None:
            overrides[key] = tuple(value) if key == "kinds" else value

    params = RuntimeParameters(**overrides)
    params.validate_bounds()
    return params, file_cfg
