"""Core types and errors for the MKS 937B controller client.

This package provides the foundational pieces shared by the protocol and
controller packages. It has no external dependencies.

Key components:
    - Errors: ``Mks937bError`` and the link/config errors derived from it.
    - Types: Enumerated parameter domains (baud rate, parity, unit, control
      mode, ...) and the ``Reading`` measurement type.

Example:
    >>> from mks937b_core import Reading
    >>> Reading(4.5e-3).ok
    True
"""

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
    ControlMode,
    EmissionCurrent,
    Filament,
    GasType,
    Parity,
    PressureUnit,
    Reading,
)

__all__ = [
    # Errors
    "ConfigError",
    "Mks937bError",
    "TransportError",
    # Constants
    "COMBINATION_CHANNELS",
    "CONTROL_CHANNELS",
    "MAX_ADDRESS",
    "MIN_ADDRESS",
    "PRESSURE_CHANNELS",
    "STATUS_OK",
    # Types
    "BaudRate",
    "ControlChannel",
    "ControlMode",
    "EmissionCurrent",
    "Filament",
    "GasType",
    "Parity",
    "PressureUnit",
    "Reading",
]
