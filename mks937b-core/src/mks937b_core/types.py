"""Common types used across mks937b packages.

This module provides the enumerated parameter domains of the MKS 937B
controller and the :class:`Reading` value type.

Classes:
    BaudRate: Serial baud rates supported by the controller.
    Parity: Serial parity settings.
    PressureUnit: Display and reporting pressure units.
    ControlMode: Sensor control modes (``CTL``).
    ControlChannel: Control set point source channels (``CSE``).
    EmissionCurrent: Hot cathode emission current settings (``EC``).
    GasType: Pirani/convection gas calibration types (``GT``).
    Filament: Hot cathode filament selection (``AF``).
    Reading: A decoded pressure measurement.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

# Address range accepted by the controller.
MIN_ADDRESS = 1
MAX_ADDRESS = 254

PRESSURE_CHANNELS: tuple[int, ...] = (1, 2, 3, 4, 5, 6)
"""Channels accepted by single-channel pressure reads (``PR<n>``)."""

COMBINATION_CHANNELS: tuple[int, ...] = (1, 2)
"""Channels accepted by combination pressure reads (``PC<n>``)."""

CONTROL_CHANNELS: tuple[int, ...] = (1, 3, 5)
"""Channels that accept sensor control and set point commands."""

STATUS_OK = "OK"


class BaudRate(IntEnum):
    """Serial baud rates supported by the controller."""

    B9600 = 9600
    B19200 = 19200
    B38400 = 38400
    B57600 = 57600
    B115200 = 115200


class Parity(Enum):
    """Serial parity settings."""

    NONE = "NONE"
    EVEN = "EVEN"
    ODD = "ODD"


class PressureUnit(Enum):
    """Pressure units understood by ``U``."""

    TORR = "Torr"
    MBAR = "MBAR"
    PASCAL = "PASCAL"
    MICRON = "Micron"


class ControlMode(Enum):
    """Sensor control modes.

    Attributes:
        AUTO: The controlling sensor may turn the HC/CC on and off.
        SAFE: The controlling sensor may turn the sensor off but never on.
        OFF: Control disabled.
    """

    AUTO = "AUTO"
    SAFE = "SAFE"
    OFF = "OFF"


class ControlChannel(Enum):
    """Channel that controls a sensor (``CSE``)."""

    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"
    OFF = "OFF"


class EmissionCurrent(Enum):
    """Hot cathode emission current settings."""

    UA20 = "20UA"
    UA100 = "100UA"
    AUTO20 = "AUTO20"
    AUTO100 = "AUTO100"


class GasType(Enum):
    """Gas calibration used by Pirani and convection Pirani sensors."""

    NITROGEN = "NITROGEN"
    ARGON = "ARGON"
    HELIUM = "HELIUM"


class Filament(IntEnum):
    """Hot cathode filament selection."""

    FIRST = 1
    SECOND = 2


@dataclass(frozen=True)
class Reading:
    """A decoded pressure measurement.

    Exactly one of the two fields is meaningful: ``value`` when ``status`` is
    ``"OK"``, otherwise ``status`` holds the description of a symbolic sensor
    state and ``value`` is ``0.0``.

    Attributes:
        value: Pressure in the controller's current unit.
        status: ``"OK"`` or a symbolic status description.
    """

    value: float
    status: str = STATUS_OK

    @property
    def ok(self) -> bool:
        """Return True if this reading carries a valid measurement."""
        return self.status == STATUS_OK

    def __str__(self) -> str:
        if self.ok:
            return f"{self.value:.2E}"
        return self.status
