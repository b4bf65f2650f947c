"""MKS 937B controller emulator.

Provides an in-process emulator implementing the ``Transport`` protocol. It
parses request frames, keeps the controller's settings in memory, and
answers the way the controller does:

- ``@AAAACK<value>;FF`` to a query,
- ``@AAAACK<parameter>;FF`` (an exact echo) to an accepted set,
- ``@AAANAK160;FF`` to an unknown or read-only mnemonic,
- ``@AAANAK169;FF`` to a set with an invalid argument,
- nothing at all to a frame addressed to another controller or a frame
  that cannot be parsed; the next read then times out.
"""

from __future__ import annotations

import re
import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable

from mks937b_core.errors import TransportError
from mks937b_core.types import (
    COMBINATION_CHANNELS,
    CONTROL_CHANNELS,
    PRESSURE_CHANNELS,
    BaudRate,
)
from mks937b_protocol.framing import ENCODING, FRAME_TERMINATOR
from mks937b_protocol.number import format_address, format_exponent, parse_int, parse_number
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
    validate_protection_target,
    validate_range,
)

NAK_UNRECOGNIZED = "160"
NAK_INVALID_ARGUMENT = "169"

# Upper control set point limit while the extended range (XCS) is on.
CSP_EXTENDED_MAX = 9.5e-1

_REQUEST_RE = re.compile(r"@([0-9]{3})([A-Z0-9]+)([?!])(.*);FF", re.DOTALL)
_CHANNEL_RE = re.compile(r"([A-Z]+)([0-9])")

_ON_OFF = ("ON", "OFF")

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


DEFAULT_PRESSURES: tuple[str, ...] = (
    "5.20E-07",
    "7.60E+02",
    "1.00E-03",
    "NOGAUGE",
    "LO<",
    "OFF",
)

DEFAULT_CONTROL_SETTINGS: dict[str, str] = {
    "PRO": "5.00E-03",
    "CSP": "5.00E-03",
    "XCS": "OFF",
    "CHP": "7.50E-03",
    "CSE": "OFF",
    "CTL": "SAFE",
    "AF": "1",
    "EC": "AUTO100",
    "GC": "1.0",
    "CP": "ON",
    "SEN": "10.0",
    "DG": "OFF",
    "DGT": "10",
    "GT": "NITROGEN",
}


@dataclass(frozen=True)
class Mks937bEmulatorConfig:
    """Configuration for an MKS 937B emulator instance.

    Args:
        address: Controller address (1-254).
        baud_rate: Initial ``BR`` setting.
        unit: Initial ``U`` setting.
        pressures: Initial ``PR1``..``PR6`` responses.
    """

    address: int = 1
    baud_rate: int = 9600
    unit: str = "Torr"
    pressures: tuple[str, ...] = DEFAULT_PRESSURES

    def __post_init__(self) -> None:
        validate_address(self.address)
        coerce_baud_rate(self.baud_rate)
        coerce_unit(self.unit)
        if len(self.pressures) != len(PRESSURE_CHANNELS):
            raise ValueError(f"pressures must hold {len(PRESSURE_CHANNELS)} values")


# ---------------------------------------------------------------------------
# Emulator
# ---------------------------------------------------------------------------


class Mks937bEmulator:
    """In-process MKS 937B emulator implementing ``Transport``.

    Args:
        config: Emulator configuration. Defaults to address 1, 9600 baud,
            Torr, and a mix of numeric and symbolic pressure readings.
    """

    def __init__(self, config: Mks937bEmulatorConfig | None = None) -> None:
        self._config = config or Mks937bEmulatorConfig()
        self._lock = threading.Lock()
        self._connected = False
        self._reply: bytes | None = None
        self._injected: deque[bytes] = deque()
        self.requests: list[str] = []
        self._reset()

        self._validators: dict[str, Callable[[str], object]] = {
            "AD": self._check_address,
            "BR": lambda text: coerce_baud_rate(parse_int(text)),
            "PAR": lambda text: coerce_parity(_exact(text, ("NONE", "EVEN", "ODD"))),
            "DLY": _check_delay,
            "U": coerce_unit,
            "PRO": lambda text: validate_protection_target(parse_number(text)),
            "XCS": lambda text: _exact(text, _ON_OFF),
            "CSE": coerce_control_channel,
            "CTL": coerce_control_mode,
            "AF": lambda text: coerce_filament(parse_int(text)),
            "EC": coerce_emission_current,
            "GC": lambda text: validate_range(
                parse_number(text), GAS_CORRECTION_MIN, GAS_CORRECTION_MAX
            ),
            "CP": lambda text: _exact(text, _ON_OFF),
            "SEN": lambda text: validate_range(
                parse_number(text), SENSITIVITY_MIN, SENSITIVITY_MAX
            ),
            "DG": lambda text: _exact(text, _ON_OFF),
            "DGT": lambda text: validate_range(parse_int(text), DEGAS_TIME_MIN, DEGAS_TIME_MAX),
            "GT": coerce_gas_type,
        }
        self._channel_validators: dict[str, Callable[[str, int], object]] = {
            "CSP": self._check_set_point,
            "CHP": self._check_hysteresis,
        }

    # -- Properties ---------------------------------------------------------

    @property
    def address(self) -> int:
        """Current controller address; changes after an accepted ``AD`` set."""
        return self._address

    # -- Transport interface ------------------------------------------------

    def connect(self) -> None:
        """Open the emulated link."""
        self._connected = True

    def disconnect(self) -> None:
        """Close the emulated link."""
        self._connected = False
        self._reply = None

    def is_connected(self) -> bool:
        """Return True if the emulated link is open."""
        return self._connected

    def write(self, data: bytes) -> None:
        """Process one request frame and buffer the reply, if any."""
        if not self._connected:
            raise TransportError("emulator is not connected")
        text = data.decode(ENCODING, errors="replace").strip()
        with self._lock:
            self.requests.append(text)
            if self._injected:
                self._reply = self._injected.popleft()
                return
            self._reply = self._process(text)

    def read_until(self, delimiter: bytes) -> bytes:
        """Return the buffered reply.

        Raises:
            TransportError: If the last request produced no reply, as a real
                read would time out.
        """
        if not self._connected:
            raise TransportError("emulator is not connected")
        with self._lock:
            reply, self._reply = self._reply, None
        if reply is None:
            raise TransportError("read timed out waiting for response")
        return reply

    # -- Test helpers -------------------------------------------------------

    def set_pressure(self, channel: int, value: float | str) -> None:
        """Set the ``PR<n>`` response for a channel.

        Args:
            channel: Channel 1-6.
            value: A pressure (formatted with ``%.2E``) or a raw token such
                as ``"LO<"``.
        """
        if channel not in PRESSURE_CHANNELS:
            raise ValueError(f"Channel {channel} out of range (1-6)")
        self._pressures[channel - 1] = _as_text(value)

    def set_combination_pressure(self, channel: int, value: float | str) -> None:
        """Set the ``PC<n>`` response for combination channel 1 or 2."""
        if channel not in COMBINATION_CHANNELS:
            raise ValueError(f"Combination channel {channel} out of range (1-2)")
        self._combination[channel - 1] = _as_text(value)

    def inject_reply(self, raw: bytes | str) -> None:
        """Queue a raw reply returned for the next request, whatever it is."""
        self._injected.append(raw.encode(ENCODING) if isinstance(raw, str) else raw)

    def get_setting(self, mnemonic: str) -> str:
        """Return the stored value for a settable mnemonic (e.g. ``"CSP1"``)."""
        return self._settings[mnemonic]

    # -- Private helpers ----------------------------------------------------

    def _reset(self) -> None:
        self._address = self._config.address
        self._pressures = list(self._config.pressures)
        self._combination = [self._config.pressures[0], self._config.pressures[2]]
        self._settings: dict[str, str] = {
            "AD": format_address(self._config.address),
            "BR": str(self._config.baud_rate),
            "PAR": "NONE",
            "DLY": "8",
            "U": self._config.unit,
        }
        for channel in CONTROL_CHANNELS:
            for base, value in DEFAULT_CONTROL_SETTINGS.items():
                self._settings[f"{base}{channel}"] = value

    def _process(self, text: str) -> bytes | None:
        match = _REQUEST_RE.fullmatch(text)
        if match is None:
            return None
        address, mnemonic, operator, parameter = match.groups()
        if int(address) != self._address:
            return None
        if operator == "?":
            return self._query(mnemonic)
        return self._set(mnemonic, parameter)

    def _query(self, mnemonic: str) -> bytes:
        if mnemonic == "PRZ":
            return self._ack(" ".join(self._pressures))
        channel_match = _CHANNEL_RE.fullmatch(mnemonic)
        if channel_match is not None:
            base, channel = channel_match.group(1), int(channel_match.group(2))
            if base == "PR" and channel in PRESSURE_CHANNELS:
                return self._ack(self._pressures[channel - 1])
            if base == "PC" and channel in COMBINATION_CHANNELS:
                return self._ack(self._combination[channel - 1])
        value = self._settings.get(mnemonic)
        if value is None:
            return self._nak(NAK_UNRECOGNIZED)
        return self._ack(value)

    def _set(self, mnemonic: str, parameter: str) -> bytes:
        if mnemonic not in self._settings:
            return self._nak(NAK_UNRECOGNIZED)
        channel_match = _CHANNEL_RE.fullmatch(mnemonic)
        if channel_match is not None:
            base, channel = channel_match.group(1), int(channel_match.group(2))
        else:
            base, channel = mnemonic, 0
        try:
            channel_validator = self._channel_validators.get(base)
            if channel_validator is not None:
                channel_validator(parameter, channel)
            else:
                self._validators[base](parameter)
        except ValueError:
            return self._nak(NAK_INVALID_ARGUMENT)
        reply = self._ack(parameter)
        self._settings[mnemonic] = parameter
        if base == "AD":
            self._address = int(parameter)
        return reply

    def _ack(self, value: str) -> bytes:
        return f"@{format_address(self._address)}ACK{value}{FRAME_TERMINATOR}".encode(ENCODING)

    def _nak(self, code: str) -> bytes:
        return f"@{format_address(self._address)}NAK{code}{FRAME_TERMINATOR}".encode(ENCODING)

    def _check_address(self, text: str) -> None:
        if len(text) != 3:
            raise ValueError(f"address must be three digits: {text!r}")
        validate_address(parse_int(text))

    def _check_set_point(self, text: str, channel: int) -> None:
        value = parse_number(text)
        extended = self._settings[f"XCS{channel}"] == "ON"
        validate_range(value, CSP_MIN, CSP_EXTENDED_MAX if extended else CSP_MAX)

    def _check_hysteresis(self, text: str, channel: int) -> None:
        set_point = parse_number(self._settings[f"CSP{channel}"])
        low, high = hysteresis_bounds(set_point)
        validate_range(parse_number(text), low, high)


def _exact(text: str, choices: tuple[str, ...]) -> str:
    if text not in choices:
        raise ValueError(f"expected one of {choices}, got {text!r}")
    return text


def _check_delay(text: str) -> None:
    if parse_int(text) < 1:
        raise ValueError(f"delay must be at least 1 ms, got {text!r}")


def _as_text(value: float | str) -> str:
    return value if isinstance(value, str) else format_exponent(value)


# ---------------------------------------------------------------------------
# Factory functions
# ---------------------------------------------------------------------------


def make_emulator(address: int = 1, baud_rate: BaudRate | int = BaudRate.B9600) -> Mks937bEmulator:
    """Create an emulator with default settings.

    Args:
        address: Controller address (1-254).
        baud_rate: Initial baud rate setting.

    Returns:
        Configured emulator instance, not yet connected.
    """
    return Mks937bEmulator(Mks937bEmulatorConfig(address=address, baud_rate=int(baud_rate)))
