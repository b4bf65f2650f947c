"""Parameter validation run before a set command is sent.

Each helper is a pure check mapped to one error type. The ``coerce_*``
helpers accept either an enum member or its raw value and return the enum
member, so callers can pass ``"MBAR"``, ``"mbar"`` or ``PressureUnit.MBAR``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from mks937b_core.types import (
    CONTROL_CHANNELS,
    MAX_ADDRESS,
    MIN_ADDRESS,
    BaudRate,
    ControlChannel,
    ControlMode,
    EmissionCurrent,
    Filament,
    GasType,
    Parity,
    PressureUnit,
)

from mks937b_protocol.errors import (
    InvalidAddressError,
    InvalidBaudRateError,
    InvalidChannelControlError,
    InvalidChannelError,
    InvalidChoiceError,
    InvalidControlModeError,
    InvalidCSEError,
    InvalidEmissionCurrentError,
    InvalidFilamentError,
    InvalidGasError,
    InvalidIntegerError,
    InvalidParityError,
    InvalidPROError,
    InvalidRangeError,
    InvalidUnitError,
)

E = TypeVar("E", bound=Enum)

# Documented parameter bounds.
PRO_MIN = 1e-5
PRO_MAX = 1e-2
CSP_MIN = 5e-4
CSP_MAX = 1e-2
CHP_FACTOR = 1.2
CHP_MAX = 0.03
GAS_CORRECTION_MIN = 0.1
GAS_CORRECTION_MAX = 50.0
SENSITIVITY_MIN = 1.0
SENSITIVITY_MAX = 50.0
DEGAS_TIME_MIN = 5
DEGAS_TIME_MAX = 240


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_address(address: int) -> int:
    """Check a controller address.

    Raises:
        InvalidAddressError: If *address* is not an integer in 1-254.
    """
    if not _is_int(address) or not MIN_ADDRESS <= address <= MAX_ADDRESS:
        raise InvalidAddressError(address)
    return address


def validate_channel(channel: int, low: int, high: int) -> int:
    """Check a channel against a contiguous range.

    Raises:
        InvalidChannelError: If *channel* is outside ``low..high``.
    """
    if not _is_int(channel) or not low <= channel <= high:
        raise InvalidChannelError(low, high, channel)
    return channel


def validate_control_channel(channel: int) -> int:
    """Check a channel used by control and sensor parameter commands.

    Raises:
        InvalidChannelControlError: If *channel* is not 1, 3 or 5.
    """
    if not _is_int(channel) or channel not in CONTROL_CHANNELS:
        raise InvalidChannelControlError(channel)
    return channel


def validate_integer(value: int) -> int:
    """Check that a whole-number parameter is an integer.

    Raises:
        InvalidIntegerError: If *value* is not an ``int`` (bools excluded).
    """
    if not _is_int(value):
        raise InvalidIntegerError(value)
    return value


def validate_range(value: float, low: float, high: float) -> float:
    """Check a numeric parameter against inclusive bounds.

    Raises:
        InvalidRangeError: If *value* is outside ``[low, high]``.
    """
    if not low <= value <= high:
        raise InvalidRangeError(low, high, value)
    return value


def validate_protection_target(target: float) -> float:
    """Check a protection set point: 0 disables protection.

    Raises:
        InvalidPROError: If *target* is neither 0 nor within 1e-5..1e-2.
    """
    if target != 0 and not PRO_MIN <= target <= PRO_MAX:
        raise InvalidPROError(PRO_MIN, PRO_MAX, target)
    return target


def hysteresis_bounds(control_set_point: float) -> tuple[float, float]:
    """Return the hysteresis bounds for a live control set point."""
    return CHP_FACTOR * control_set_point, CHP_MAX


def _coerce(domain: type[E], value: Any, error: type[InvalidChoiceError]) -> E:
    if isinstance(value, domain):
        return value
    for member in domain:
        raw = member.value
        if isinstance(raw, str) and isinstance(value, str):
            if raw.upper() == value.strip().upper():
                return member
        elif raw == value and not isinstance(value, bool):
            return member
    raise error(value)


def coerce_baud_rate(value: BaudRate | int) -> BaudRate:
    """Return the :class:`BaudRate` for *value* or raise InvalidBaudRateError."""
    return _coerce(BaudRate, value, InvalidBaudRateError)


def coerce_parity(value: Parity | str) -> Parity:
    """Return the :class:`Parity` for *value* or raise InvalidParityError."""
    return _coerce(Parity, value, InvalidParityError)


def coerce_unit(value: PressureUnit | str) -> PressureUnit:
    """Return the :class:`PressureUnit` for *value* or raise InvalidUnitError."""
    return _coerce(PressureUnit, value, InvalidUnitError)


def coerce_control_mode(value: ControlMode | str) -> ControlMode:
    """Return the :class:`ControlMode` for *value* or raise InvalidControlModeError."""
    return _coerce(ControlMode, value, InvalidControlModeError)


def coerce_control_channel(value: ControlChannel | str) -> ControlChannel:
    """Return the :class:`ControlChannel` for *value* or raise InvalidCSEError."""
    return _coerce(ControlChannel, value, InvalidCSEError)


def coerce_emission_current(value: EmissionCurrent | str) -> EmissionCurrent:
    """Return the :class:`EmissionCurrent` for *value* or raise InvalidEmissionCurrentError."""
    return _coerce(EmissionCurrent, value, InvalidEmissionCurrentError)


def coerce_gas_type(value: GasType | str) -> GasType:
    """Return the :class:`GasType` for *value* or raise InvalidGasError."""
    return _coerce(GasType, value, InvalidGasError)


def coerce_filament(value: Filament | int) -> Filament:
    """Return the :class:`Filament` for *value* or raise InvalidFilamentError."""
    return _coerce(Filament, value, InvalidFilamentError)
