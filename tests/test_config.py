"""Tests for sensor_fleet.config - parameters, YAML loading, layering."""

from __future__ import annotations

from pathlib import Path

import pytest

from sensor_fleet.config import (
    ConfigurationError,
    RuntimeParameters,
    SimulatorFileConfig,
    load_yaml_config,
    resolve_parameters,
)
from sensor_fleet.models import DEFAULT_KINDS

# -----------------------------------------------------------------------
# RuntimeParameters
# -----------------------------------------------------------------------


class TestRuntimeParameters:
    """RuntimeParameters defaults and bound validation."""

    def test_defaults(self) -> None:
        params = RuntimeParameters()
        assert params.sensor_count == 1000
        assert params.min_rate == 4.0
        assert params.max_rate == 4.0
        assert params.kinds == DEFAULT_KINDS
        params.validate_bounds()

    def test_equal_bounds_are_valid(self) -> None:
        RuntimeParameters(sensor_count=0, min_rate=2.5, max_rate=2.5).validate_bounds()

    def test_min_rate_zero(self) -> None:
        with pytest.raises(ConfigurationError, match="greater than 0"):
            RuntimeParameters(min_rate=0).validate_bounds()

    def test_min_above_max(self) -> None:
        with pytest.raises(ConfigurationError, match="min-rate cannot be greater than max-rate"):
            RuntimeParameters(min_rate=6.0, max_rate=3.0).validate_bounds()

    def test_negative_count(self) -> None:
        with pytest.raises(ConfigurationError, match=">= 0"):
            RuntimeParameters(sensor_count=-5).validate_bounds()

    def test_empty_kinds(self) -> None:
        with pytest.raises(ConfigurationError, match="kind"):
            RuntimeParameters(kinds=()).validate_bounds()


# -----------------------------------------------------------------------
# load_yaml_config
# -----------------------------------------------------------------------


class TestLoadYAMLConfig:
    """load_yaml_config() parsing from temporary YAML files."""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "nonexistent.yaml")

    def test_hyphenated_keys(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("""\
num-sensors: 20
min-rate: 6.0
max-rate: 12.0
""")
        cfg = load_yaml_config(cfg_file)
        assert cfg.sensor_count == 20
        assert cfg.min_rate == 6.0
        assert cfg.max_rate == 12.0
        assert cfg.source == str(cfg_file)

    def test_snake_case_and_sections(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("""\
sensor_count: 3
kinds: [temperature, co2]
log_level: DEBUG
duration_s: 30
publisher:
  type: console
""")
        cfg = load_yaml_config(cfg_file)
        assert cfg.sensor_count == 3
        assert cfg.kinds == ["temperature", "co2"]
        assert cfg.log_level == "DEBUG"
        assert cfg.duration_s == 30.0
        assert cfg.publisher == {"type": "console"}

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "empty.yaml"
        cfg_file.write_text("")
        cfg = load_yaml_config(cfg_file)
        assert cfg.sensor_count is None
        assert cfg.publisher == {}

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "list.yaml"
        cfg_file.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_yaml_config(cfg_file)

    def test_wrong_type_rejected(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text("min-rate: fast\n")
        with pytest.raises(ConfigurationError, match="Invalid value"):
            load_yaml_config(cfg_file)

    def test_log_level_normalised(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("log_level: warning\n")
        assert load_yaml_config(cfg_file).log_level == "WARNING"

    def test_unknown_log_level_rejected(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("log_level: LOUD\n")
        with pytest.raises(ConfigurationError, match="log_level must be one of"):
            load_yaml_config(cfg_file)

    def test_invalid_yaml_rejected(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "broken.yaml"
        cfg_file.write_text("num-sensors: [1, 2\n")
        with pytest.raises(ConfigurationError, match="Error reading config file"):
            load_yaml_config(cfg_file)


# -----------------------------------------------------------------------
# resolve_parameters
# -----------------------------------------------------------------------


class TestResolveParameters:
    """Config file values override command-line values."""

    def test_flags_only(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        params, file_cfg = resolve_parameters(sensor_count=10, min_rate=5.0, max_rate=10.0)
        assert params == RuntimeParameters(sensor_count=10, min_rate=5.0, max_rate=10.0)
        assert file_cfg == SimulatorFileConfig()

    def test_file_overrides_flags(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "sim.yaml"
        cfg_file.write_text("min-rate: 6.0\nmax-rate: 12.0\n")
        params, _ = resolve_parameters(sensor_count=10, min_rate=1.0, max_rate=2.0, config_path=cfg_file)
        assert params.sensor_count == 10
        assert params.min_rate == 6.0
        assert params.max_rate == 12.0

    def test_default_config_in_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "config.yaml").write_text("num-sensors: 7\n")
        monkeypatch.chdir(tmp_path)
        params, file_cfg = resolve_parameters(sensor_count=1000, min_rate=4.0, max_rate=4.0)
        assert params.sensor_count == 7
        assert file_cfg.source == "config.yaml"

    def test_kinds_from_file(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "sim.yaml"
        cfg_file.write_text("kinds: [co2, noise]\n")
        params, _ = resolve_parameters(sensor_count=2, min_rate=1.0, max_rate=1.0, config_path=cfg_file)
        assert params.kinds == ("co2", "noise")

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            resolve_parameters(sensor_count=1, min_rate=1.0, max_rate=1.0, config_path=tmp_path / "nope.yaml")

    @pytest.mark.parametrize("rate", [".nan", ".inf"])
    def test_non_finite_rate_from_file_rejected(self, tmp_path: Path, rate: str) -> None:
        cfg_file = tmp_path / "sim.yaml"
        cfg_file.write_text(f"max-rate: {rate}\n")
        with pytest.raises(ConfigurationError, match="finite"):
            resolve_parameters(sensor_count=1, min_rate=1.0, max_rate=2.0, config_path=cfg_file)

    def test_invalid_result_rejected(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "sim.yaml"
        cfg_file.write_text("min-rate: 0\n")
        with pytest.raises(ConfigurationError, match="greater than 0"):
            resolve_parameters(sensor_count=1, min_rate=1.0, max_rate=2.0, config_path=cfg_file)
