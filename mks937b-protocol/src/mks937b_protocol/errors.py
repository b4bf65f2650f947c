"""MKS 937B protocol and validation error types.

This module defines the exception classes raised while building request
frames, verifying the controller's acknowledgement frames, decoding readings,
and validating parameters before a set command is sent. All exceptions
inherit from :class:`mks937b_core.errors.Mks937bError`.

Exception hierarchy:
    Mks937bError
    +-- ProtocolError
    |   +-- NotConnectedError
    |   +-- UnexpectedReplyError
    |   +-- UnexpectedAddressError
    |   +-- UnexpectedParameterError
    |   +-- NegativeAcknowledgeError
    +-- ValidationError (also a ValueError)
        +-- InvalidReadingError
        +-- InvalidResponseValueError
        +-- InvalidAddressError
        +-- InvalidChannelError
        +-- InvalidChannelControlError
        +-- InvalidIntegerError
        +-- InvalidRangeError
        |   +-- InvalidPROError
        +-- InvalidChoiceError
            +-- InvalidBaudRateError, InvalidParityError, InvalidUnitError,
                InvalidControlModeError, InvalidCSEError, InvalidFilamentError,
                InvalidEmissionCurrentError, InvalidGasError
"""

from __future__ import annotations

from typing import Any, ClassVar

from mks937b_core.errors import Mks937bError
from mks937b_core.types import (
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

# ---------------------------------------------------------------------------
# Protocol errors
# ---------------------------------------------------------------------------


class ProtocolError(Mks937bError):
    """Base exception for request/response protocol failures.

    Raised when a conversation with the controller does not follow the
    expected frame grammar or acknowledgement rules.
    """


class NotConnectedError(ProtocolError):
    """Raised when a query or set is attempted while disconnected."""

    def __init__(self) -> None:
        super().__init__("device not connected")


class UnexpectedReplyError(ProtocolError):
    """Raised when a response does not match the frame grammar.

    Covers truncated frames, transport noise and misplaced ACK/NAK tags.

    Attributes:
        sent: The request frame that was written.
        received: The raw response text that was read.
    """

    def __init__(self, sent: str, received: str) -> None:
        self.sent = sent
        self.received = received
        super().__init__(f"unexpected response, sent {sent!r} got {received!r}")


class UnexpectedAddressError(ProtocolError):
    """Raised when a response carries a different address than the request.

    Attributes:
        expected: Zero-padded address used in the request.
        got: Address found in the response.
    """

    def __init__(self, expected: str, got: str) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"invalid received address, expected {expected} got {got}")


class UnexpectedParameterError(ProtocolError):
    """Raised when a set acknowledgement does not echo the sent parameter.

    Attributes:
        expected: Parameter string that was sent.
        got: Parameter string echoed by the controller.
    """

    def __init__(self, expected: str, got: str) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"invalid received parameter, expected {expected!r} got {got!r}")


class NegativeAcknowledgeError(ProtocolError):
    """Raised when the controller answers with a NAK frame.

    Attributes:
        sent: The request frame that was written.
        code: NAK code reported by the controller (e.g. ``"160"``).
    """

    def __init__(self, sent: str, code: str) -> None:
        self.sent = sent
        self.code = code
        super().__init__(f"controller rejected {sent!r} with NAK{code}")


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class ValidationError(Mks937bError, ValueError):
    """Base exception for values rejected before or after an exchange."""


class InvalidReadingError(ValidationError):
    """Raised when a pressure field is neither a status token nor a number.

    Attributes:
        reading: The offending text.
    """

    def __init__(self, reading: str, reason: str | None = None) -> None:
        self.reading = reading
        detail = reason or "not a status token or a number"
        super().__init__(f"invalid pressure reading {reading!r}: {detail}")


class InvalidResponseValueError(ValidationError):
    """Raised when an acknowledged response value cannot be parsed.

    Attributes:
        mnemonic: The queried command, e.g. ``"AD"`` or ``"CP1"``.
        value: The response value that was read.
    """

    def __init__(self, mnemonic: str, value: str) -> None:
        self.mnemonic = mnemonic
        self.value = value
        super().__init__(f"invalid value for {mnemonic}: {value!r}")


class InvalidAddressError(ValidationError):
    """Raised for controller addresses outside 1..254.

    Attributes:
        got: The rejected address.
    """

    def __init__(self, got: int) -> None:
        self.got = got
        super().__init__(
            f"address must be an integer value between {MIN_ADDRESS} and {MAX_ADDRESS}, got {got}"
        )


class InvalidChannelError(ValidationError):
    """Raised when a channel is outside an operation's contiguous range.

    Attributes:
        min_channel: Lowest accepted channel.
        max_channel: Highest accepted channel.
        channel: The rejected channel.
    """

    def __init__(self, min_channel: int, max_channel: int, channel: int) -> None:
        self.min_channel = min_channel
        self.max_channel = max_channel
        self.channel = channel
        super().__init__(
            f"channel must be an integer value between {min_channel} and {max_channel}, "
            f"got {channel}"
        )


class InvalidChannelControlError(ValidationError):
    """Raised when a control command targets a channel other than 1, 3 or 5.

    Attributes:
        channel: The rejected channel.
    """

    def __init__(self, channel: int) -> None:
        self.channel = channel
        super().__init__(f"channel must be an integer value among 1, 3 or 5, got {channel}")


class InvalidIntegerError(ValidationError):
    """Raised when a whole-number parameter is given a non-integer.

    Attributes:
        got: The rejected value.
    """

    def __init__(self, got: Any) -> None:
        self.got = got
        super().__init__(f"value must be an integer, got {got!r}")


class InvalidRangeError(ValidationError):
    """Raised when a numeric parameter is outside its documented bounds.

    Attributes:
        min_value: Lower bound (inclusive).
        max_value: Upper bound (inclusive).
        got: The rejected value.
    """

    def __init__(self, min_value: float, max_value: float, got: float) -> None:
        self.min_value = min_value
        self.max_value = max_value
        self.got = got
        super().__init__(self._describe())

    def _describe(self) -> str:
        return (
            f"the target value must be between {self.min_value:.2E} and "
            f"{self.max_value:.2E}, got {self.got:.2E}"
        )


class InvalidPROError(InvalidRangeError):
    """Raised for protection set points that are neither 0 nor in range."""

    def _describe(self) -> str:
        return (
            f"the protection target must be 0 (disabled) or between {self.min_value:.2E} "
            f"and {self.max_value:.2E}, got {self.got:.2E}"
        )


class InvalidChoiceError(ValidationError):
    """Raised when a parameter is not one of an enumerated set.

    Subclasses name the parameter and the enum listing the valid values.

    Attributes:
        got: The rejected value.
        choices: The accepted raw values.
    """

    parameter: ClassVar[str] = "value"
    domain: ClassVar[Any] = None

    def __init__(self, got: Any) -> None:
        self.got = got
        self.choices: tuple[Any, ...] = tuple(member.value for member in self.domain)
        allowed = ", ".join(str(choice) for choice in self.choices)
        super().__init__(f"{self.parameter} must be one of {allowed}, got {got!r}")


class InvalidBaudRateError(InvalidChoiceError):
    """Raised for unsupported baud rates."""

    parameter = "baud rate"
    domain = BaudRate


class InvalidParityError(InvalidChoiceError):
    """Raised for unsupported parity settings."""

    parameter = "parity"
    domain = Parity


class InvalidUnitError(InvalidChoiceError):
    """Raised for unsupported pressure units."""

    parameter = "unit"
    domain = PressureUnit


class InvalidControlModeError(InvalidChoiceError):
    """Raised for unsupported control modes."""

    parameter = "control mode"
    domain = ControlMode


class InvalidCSEError(InvalidChoiceError):
    """Raised for unsupported control set point channels."""

    parameter = "control channel"
    domain = ControlChannel


class InvalidFilamentError(InvalidChoiceError):
    """Raised for filament numbers other than 1 or 2."""

    parameter = "filament"
    domain = Filament


class InvalidEmissionCurrentError(InvalidChoiceError):
    """Raised for unsupported emission current settings."""

    parameter = "emission current"
    domain = EmissionCurrent


class InvalidGasError(InvalidChoiceError):
    """Raised for unsupported gas types."""

    parameter = "gas type"
    domain = GasType
