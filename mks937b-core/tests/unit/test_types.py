"""Tests for shared types and the base error hierarchy."""

from __future__ import annotations

import dataclasses

import pytest

from mks937b_core.errors import ConfigError, Mks937bError, TransportError
from mks937b_core.types import (
    COMBINATION_CHANNELS,
    CONTROL_CHANNELS,
    MAX_ADDRESS,
    MIN_ADDRESS,
    PRESSURE_CHANNELS,
    STATUS_OK,
    BaudRate,
    ControlChannel,
    EmissionCurrent,
    Filament,
    PressureUnit,
    Reading,
)


class TestConstants:
    """Tests for channel and address constants."""

    def test_address_range(self) -> None:
        assert (MIN_ADDRESS, MAX_ADDRESS) == (1, 254)

    def test_channel_sets(self) -> None:
        assert PRESSURE_CHANNELS == (1, 2, 3, 4, 5, 6)
        assert COMBINATION_CHANNELS == (1, 2)
        assert CONTROL_CHANNELS == (1, 3, 5)


class TestEnums:
    """Tests for parameter domains."""

    def test_baud_rates(self) -> None:
        assert [b.value for b in BaudRate] == [9600, 19200, 38400, 57600, 115200]
        assert BaudRate.B19200 == 19200

    def test_unit_wire_spelling(self) -> None:
        assert PressureUnit.TORR.value == "Torr"
        assert PressureUnit.MICRON.value == "Micron"
        assert PressureUnit.MBAR.value == "MBAR"

    def test_emission_current_wire_spelling(self) -> None:
        assert EmissionCurrent.UA20.value == "20UA"
        assert EmissionCurrent.UA100.value == "100UA"

    def test_control_channel_includes_off(self) -> None:
        assert ControlChannel("OFF") is ControlChannel.OFF
        assert len(ControlChannel) == 7

    def test_filament_is_int(self) -> None:
        assert Filament(2) is Filament.SECOND
        assert Filament.FIRST == 1


class TestReading:
    """Tests for the Reading value type."""

    def test_default_status_is_ok(self) -> None:
        reading = Reading(4.5e-3)
        assert reading.status == STATUS_OK
        assert reading.ok

    def test_symbolic_reading_not_ok(self) -> None:
        reading = Reading(0.0, "Pressure lower than minimum")
        assert not reading.ok

    def test_str_numeric(self) -> None:
        assert str(Reading(4.5e-3)) == "4.50E-03"

    def test_str_symbolic(self) -> None:
        assert str(Reading(0.0, "Combination disabled")) == "Combination disabled"

    def test_frozen(self) -> None:
        reading = Reading(1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            reading.value = 2.0  # type: ignore[misc]

    def test_equality(self) -> None:
        assert Reading(1e-3) == Reading(1e-3, STATUS_OK)


class TestErrors:
    """Tests for the base error hierarchy."""

    def test_transport_error_is_base(self) -> None:
        assert issubclass(TransportError, Mks937bError)

    def test_config_error_is_base(self) -> None:
        assert issubclass(ConfigError, Mks937bError)

    def test_message_preserved(self) -> None:
        assert str(TransportError("read timed out")) == "read timed out"
