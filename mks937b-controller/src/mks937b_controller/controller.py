"""MKS 937B vacuum gauge controller driver.

Wraps a :class:`~mks937b_protocol.gateway.CommandGateway` with typed methods
for the controller's system, reading and per-channel control commands. Every
setter validates its input locally, formats the parameter exactly as the
controller expects it, and relies on the gateway to confirm the echo.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType
from typing import TypeVar

from mks937b_core.types import (
    COMBINATION_CHANNELS,
    PRESSURE_CHANNELS,
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
from mks937b_protocol import CommandGateway, InvalidResponseValueError, VisaTransport
from mks937b_protocol.number import (
    format_address,
    format_bool,
    format_exponent,
    format_fixed,
    parse_bool,
    parse_int,
    parse_number,
)
from mks937b_protocol.readings import decode_reading, decode_readings
from mks937b_protocol.validation import (
    CSP_MAX,
    CSP_MIN,
    DEGAS_TIME_MAX,
    DEGAS_TIME_MIN,
    GAS_CORRECTION_MAX,
    GAS_CORRECTION_MIN,
    SENSITIVITY_MAX,
    SENSITIVITY_MIN,
    coerce_baud_rate,
    coerce_control_channel,
    coerce_control_mode,
    coerce_emission_current,
    coerce_filament,
    coerce_gas_type,
    coerce_parity,
    coerce_unit,
    hysteresis_bounds,
    validate_address,
    validate_channel,
    validate_control_channel,
    validate_integer,
    validate_protection_target,
    validate_range,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Mks937b:
    """High-level driver for the MKS 937B multi-sensor controller.

    Args:
        gateway: A :class:`CommandGateway` bound to the controller address.
    """

    def __init__(self, gateway: CommandGateway) -> None:
        self._gateway = gateway

    @property
    def address(self) -> int:
        """Address this driver talks to."""
        return self._gateway.address

    # -- Lifecycle ----------------------------------------------------------

    def connect(self) -> None:
        """Open the underlying transport."""
        self._gateway.connect()

    def disconnect(self) -> None:
        """Close the underlying transport."""
        self._gateway.disconnect()

    def is_connected(self) -> bool:
        """Return True if the underlying transport is open."""
        return self._gateway.is_connected()

    def __enter__(self) -> Mks937b:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.disconnect()

    def _query_value(self, mnemonic: str, parse: Callable[[str], T]) -> T:
        response = self._gateway.query(mnemonic)
        try:
            return parse(response)
        except ValueError as exc:
            raise InvalidResponseValueError(mnemonic, response) from exc

    # -- System -------------------------------------------------------------

    def get_address(self) -> int:
        """Query the controller address (``AD``)."""
        return self._query_value("AD", parse_int)

    def set_address(self, address: int) -> None:
        """Change the controller address.

        The driver keeps talking to the old address; create a new driver to
        reach the controller afterwards.

        Args:
            address: New address, 1-254.
        """
        validate_address(address)
        self._gateway.set("AD", format_address(address))
        logger.info("Controller address changed from %03d to %03d", self.address, address)

    def get_baud_rate(self) -> BaudRate:
        """Query the serial baud rate (``BR``)."""
        return coerce_baud_rate(self._query_value("BR", parse_int))

    def set_baud_rate(self, baud_rate: BaudRate | int) -> None:
        """Set the serial baud rate.

        Args:
            baud_rate: One of 9600, 19200, 38400, 57600, 115200.
        """
        rate = coerce_baud_rate(baud_rate)
        self._gateway.set("BR", str(rate.value))

    def get_parity(self) -> Parity:
        """Query the serial parity (``PAR``)."""
        return coerce_parity(self._gateway.query("PAR"))

    def set_parity(self, parity: Parity | str) -> None:
        """Set the serial parity (NONE, EVEN or ODD)."""
        self._gateway.set("PAR", coerce_parity(parity).value)

    def get_delay_time(self) -> int:
        """Query the RS-485 response delay in milliseconds (``DLY``)."""
        return self._query_value("DLY", parse_int)

    def set_delay_time(self, delay_ms: int) -> None:
        """Set the RS-485 response delay in milliseconds.

        Reliable communication needs more than 1 ms; the default is 8 ms.
        """
        validate_integer(delay_ms)
        self._gateway.set("DLY", str(delay_ms))

    def get_pressure_unit(self) -> PressureUnit:
        """Query the pressure unit (``U``)."""
        return coerce_unit(self._gateway.query("U"))

    def set_pressure_unit(self, unit: PressureUnit | str) -> None:
        """Set the pressure unit (Torr, MBAR, PASCAL or Micron)."""
        self._gateway.set("U", coerce_unit(unit).value)

    # -- Readings -----------------------------------------------------------

    def get_pressure(self, channel: int) -> Reading:
        """Read the pressure of one channel (``PR<n>``).

        Args:
            channel: Channel 1-6.
        """
        validate_channel(channel, PRESSURE_CHANNELS[0], PRESSURE_CHANNELS[-1])
        return decode_reading(self._gateway.query(f"PR{channel}"))

    def get_pressures(self) -> tuple[Reading, ...]:
        """Read the pressures of all six channels (``PRZ``).

        Raises:
            InvalidReadingError: If the response does not hold exactly six
                decodable fields.
        """
        return decode_readings(self._gateway.query("PRZ"), len(PRESSURE_CHANNELS))

    def get_pressure_combination(self, channel: int) -> Reading:
        """Read a channel together with its combination sensor (``PC<n>``).

        Args:
            channel: Combination channel 1 or 2.
        """
        validate_channel(channel, COMBINATION_CHANNELS[0], COMBINATION_CHANNELS[-1])
        return decode_reading(self._gateway.query(f"PC{channel}"))

    # -- Control set points -------------------------------------------------

    def get_protection_target(self, channel: int) -> float:
        """Query the protection set point (``PRO<n>``)."""
        validate_control_channel(channel)
        return self._query_value(f"PRO{channel}", parse_number)

    def set_protection_target(self, channel: int, target: float) -> None:
        """Set the protection set point.

        Valid range is 1e-5 to 1e-2 Torr; 0 disables protection. The
        controller default is 5e-3 Torr.
        """
        validate_control_channel(channel)
        validate_protection_target(target)
        self._gateway.set(f"PRO{channel}", format_exponent(target))

    def get_target(self, channel: int) -> float:
        """Query the control set point (``CSP<n>``)."""
        validate_control_channel(channel)
        return self._query_value(f"CSP{channel}", parse_number)

    def set_target(self, channel: int, target: float) -> None:
        """Set the control set point.

        Valid range is 5e-4 to 1e-2 Torr.
        """
        validate_control_channel(channel)
        validate_range(target, CSP_MIN, CSP_MAX)
        self._gateway.set(f"CSP{channel}", format_exponent(target))

    def get_upper_control_status(self, channel: int) -> bool:
        """Query whether the extended control range is enabled (``XCS<n>``)."""
        validate_control_channel(channel)
        return self._query_value(f"XCS{channel}", parse_bool)

    def set_upper_control_status(self, channel: int, enabled: bool) -> None:
        """Enable or disable the extended control range (1e-2 to 9.5e-1 Torr)."""
        validate_control_channel(channel)
        self._gateway.set(f"XCS{channel}", format_bool(enabled))

    def get_hysteresis_target(self, channel: int) -> float:
        """Query the control set point hysteresis (``CHP<n>``)."""
        validate_control_channel(channel)
        return self._query_value(f"CHP{channel}", parse_number)

    def set_hysteresis_target(self, channel: int, target: float) -> None:
        """Set the control set point hysteresis.

        The valid range depends on the live control set point: from
        1.2 x CSP to 0.03 Torr. The set point is read first, then the write
        is sent. The two exchanges are separate round trips, so another
        caller may change the set point in between.

        Raises:
            InvalidRangeError: If *target* is outside ``[1.2 x CSP, 0.03]``.
        """
        validate_control_channel(channel)
        low, high = hysteresis_bounds(self.get_target(channel))
        validate_range(target, low, high)
        self._gateway.set(f"CHP{channel}", format_exponent(target))

    # -- Control configuration ----------------------------------------------

    def get_control_channel(self, channel: int) -> ControlChannel:
        """Query which channel controls this sensor (``CSE<n>``)."""
        validate_control_channel(channel)
        return coerce_control_channel(self._gateway.query(f"CSE{channel}"))

    def set_control_channel(self, channel: int, source: ControlChannel | str) -> None:
        """Select the controlling channel (A1, A2, B1, B2, C1, C2 or OFF)."""
        validate_control_channel(channel)
        self._gateway.set(f"CSE{channel}", coerce_control_channel(source).value)

    def get_control_mode(self, channel: int) -> ControlMode:
        """Query the control mode (``CTL<n>``)."""
        validate_control_channel(channel)
        return coerce_control_mode(self._gateway.query(f"CTL{channel}"))

    def set_control_mode(self, channel: int, mode: ControlMode | str) -> None:
        """Set the control mode.

        Modes:
            AUTO: HC/CC can be turned on or off by the controlling sensor.
            SAFE: The sensor can be turned off, but not on, by control.
            OFF: Control disabled.
        """
        validate_control_channel(channel)
        self._gateway.set(f"CTL{channel}", coerce_control_mode(mode).value)

    # -- Hot cathode --------------------------------------------------------

    def get_active_filament(self, channel: int) -> Filament:
        """Query the active hot cathode filament (``AF<n>``)."""
        validate_control_channel(channel)
        return coerce_filament(self._query_value(f"AF{channel}", parse_int))

    def set_active_filament(self, channel: int, filament: Filament | int) -> None:
        """Select hot cathode filament 1 or 2."""
        validate_control_channel(channel)
        self._gateway.set(f"AF{channel}", str(coerce_filament(filament).value))

    def get_emission_current(self, channel: int) -> EmissionCurrent:
        """Query the hot cathode emission current (``EC<n>``)."""
        validate_control_channel(channel)
        return coerce_emission_current(self._gateway.query(f"EC{channel}"))

    def set_emission_current(self, channel: int, current: EmissionCurrent | str) -> None:
        """Set the emission current (20UA, 100UA, AUTO20 or AUTO100)."""
        validate_control_channel(channel)
        self._gateway.set(f"EC{channel}", coerce_emission_current(current).value)

    def get_gas_correction(self, channel: int) -> float:
        """Query the hot cathode gas correction factor (``GC<n>``)."""
        validate_control_channel(channel)
        return self._query_value(f"GC{channel}", parse_number)

    def set_gas_correction(self, channel: int, factor: float) -> None:
        """Set the gas correction factor, 0.1 to 50.0."""
        validate_control_channel(channel)
        validate_range(factor, GAS_CORRECTION_MIN, GAS_CORRECTION_MAX)
        self._gateway.set(f"GC{channel}", format_fixed(factor))

    def get_power_status(self, channel: int) -> bool:
        """Query sensor power (PR, CP, HC) or high voltage (CC) (``CP<n>``)."""
        validate_control_channel(channel)
        return self._query_value(f"CP{channel}", parse_bool)

    def set_power_status(self, channel: int, enabled: bool) -> None:
        """Switch sensor power or cold cathode high voltage on or off."""
        validate_control_channel(channel)
        self._gateway.set(f"CP{channel}", format_bool(enabled))

    def get_gas_sensitivity(self, channel: int) -> float:
        """Query the hot cathode gas sensitivity (``SEN<n>``)."""
        validate_control_channel(channel)
        return self._query_value(f"SEN{channel}", parse_number)

    def set_gas_sensitivity(self, channel: int, sensitivity: float) -> None:
        """Set the gas sensitivity, 1.0 to 50.0."""
        validate_control_channel(channel)
        validate_range(sensitivity, SENSITIVITY_MIN, SENSITIVITY_MAX)
        self._gateway.set(f"SEN{channel}", format_fixed(sensitivity))

    def get_degas_status(self, channel: int) -> bool:
        """Query whether hot cathode degas is running (``DG<n>``)."""
        validate_control_channel(channel)
        return self._query_value(f"DG{channel}", parse_bool)

    def set_degas_status(self, channel: int, enabled: bool) -> None:
        """Start or stop hot cathode degas."""
        validate_control_channel(channel)
        self._gateway.set(f"DG{channel}", format_bool(enabled))

    def get_degas_time(self, channel: int) -> int:
        """Query the hot cathode degas time in seconds (``DGT<n>``)."""
        validate_control_channel(channel)
        return self._query_value(f"DGT{channel}", parse_int)

    def set_degas_time(self, channel: int, seconds: int) -> None:
        """Set the degas time, 5 to 240 seconds."""
        validate_control_channel(channel)
        validate_integer(seconds)
        validate_range(seconds, DEGAS_TIME_MIN, DEGAS_TIME_MAX)
        self._gateway.set(f"DGT{channel}", str(seconds))

    # -- Pirani -------------------------------------------------------------

    def get_gas_type(self, channel: int) -> GasType:
        """Query the Pirani gas calibration (``GT<n>``)."""
        validate_control_channel(channel)
        return coerce_gas_type(self._gateway.query(f"GT{channel}"))

    def set_gas_type(self, channel: int, gas: GasType | str) -> None:
        """Set the Pirani gas calibration (NITROGEN, ARGON or HELIUM)."""
        validate_control_channel(channel)
        self._gateway.set(f"GT{channel}", coerce_gas_type(gas).value)


def create_instrument(
    resource: str,
    address: int,
    *,
    timeout_ms: int = 1000,
    baud_rate: BaudRate | int = BaudRate.B9600,
    connect: bool = True,
) -> Mks937b:
    """Create an MKS 937B driver from a VISA resource string.

    Standard factory entry point for programmatic use and the CLI. Builds a
    :class:`VisaTransport`, wraps it in a :class:`CommandGateway` and returns
    a :class:`Mks937b`, connected unless *connect* is False.

    Args:
        resource: VISA resource string
            (e.g. ``"TCPIP::10.0.4.135::4001::SOCKET"``).
        address: Controller address, 1-254.
        timeout_ms: Read/write timeout in milliseconds.
        baud_rate: Serial baud rate (serial resources only).
        connect: Open the transport before returning.

    Returns:
        Driver instance.
    """
    transport = VisaTransport(resource, timeout_ms=timeout_ms, baud_rate=baud_rate)
    controller = Mks937b(CommandGateway(transport, address))
    if connect:
        controller.connect()
    return controller
