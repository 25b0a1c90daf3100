"""Tests for sensor_fleet.models - identities, channel selection, wire format."""

from __future__ import annotations

import json
from datetime import datetime

import pytest
from pydantic import ValidationError

from sensor_fleet.models import DEFAULT_KINDS, MeasurementKind, Reading, SensorIdentity, channel_for

# -----------------------------------------------------------------------
# Channel selection
# -----------------------------------------------------------------------


class TestChannelFor:
    """channel_for() maps an index onto the fixed kind list."""

    def test_default_kind_order(self) -> None:
        assert DEFAULT_KINDS == ("temperature", "pressure", "humidity")

    @pytest.mark.parametrize(
        ("index", "expected"),
        [(0, "temperature"), (1, "pressure"), (2, "humidity"), (3, "temperature"), (1001, "humidity")],
    )
    def test_index_mod_three(self, index: int, expected: str) -> None:
        assert channel_for(index) == expected

    def test_deterministic_for_many_indices(self) -> None:
        for i in range(300):
            assert channel_for(i) == DEFAULT_KINDS[i % 3]

    def test_custom_kinds(self) -> None:
        assert channel_for(5, ("a", "b")) == "b"


# -----------------------------------------------------------------------
# SensorIdentity
# -----------------------------------------------------------------------


class TestSensorIdentity:
    """SensorIdentity naming and immutability."""

    def test_from_index(self) -> None:
        ident = SensorIdentity.from_index(4)
        assert ident.index == 4
        assert ident.kind == MeasurementKind.PRESSURE
        assert ident.channel == "pressure"

    def test_names_are_zero_padded(self) -> None:
        ident = SensorIdentity.from_index(7)
        assert ident.short_name == "sensor_007"
        assert ident.name == "pressure:sensor_007"

    def test_large_index_not_truncated(self) -> None:
        assert SensorIdentity.from_index(1234).short_name == "sensor_1234"

    def test_frozen(self) -> None:
        ident = SensorIdentity.from_index(0)
        with pytest.raises(ValidationError):
            ident.index = 5  # type: ignore[misc]


# -----------------------------------------------------------------------
# Reading
# -----------------------------------------------------------------------


class TestReading:
    """Reading construction, wire encoding and decoding."""

    def test_create_uses_identity(self) -> None:
        reading = Reading.create(SensorIdentity.from_index(0), 27.5)
        assert reading.sensor_id == "temperature:sensor_000"
        assert reading.channel == "temperature"
        assert reading.short_name == "sensor_000"
        # ISO-8601 timestamp
        datetime.fromisoformat(reading.timestamp)

    def test_to_wire(self) -> None:
        reading = Reading.create(SensorIdentity.from_index(2), 81.25)
        assert reading.to_wire() == "humidity:sensor_002=81.250000"

    def test_from_wire(self) -> None:
        reading = Reading.from_wire("pressure", "pressure:sensor_013=1.012345")
        assert reading.sensor_id == "pressure:sensor_013"
        assert reading.short_name == "sensor_013"
        assert reading.channel == "pressure"
        assert reading.value == pytest.approx(1.012345)

    def test_from_wire_bytes(self) -> None:
        reading = Reading.from_wire("temperature", b"temperature:sensor_000=30.000000")
        assert reading.value == 30.0

    @pytest.mark.parametrize("message", ["no-separator", "=12.0", "temperature:sensor_000=abc"])
    def test_from_wire_malformed(self, message: str) -> None:
        with pytest.raises(ValueError):
            Reading.from_wire("temperature", message)

    def test_json_shape(self) -> None:
        reading = Reading(
            sensor_id="temperature:sensor_001",
            channel="temperature",
            timestamp="2024-01-01T00:00:00+00:00",
            value=23.5,
        )
        assert json.loads(reading.model_dump_json()) == {
            "sensor_id": "temperature:sensor_001",
            "channel": "temperature",
            "timestamp": "2024-01-01T00:00:00+00:00",
            "value": 23.5,
        }
