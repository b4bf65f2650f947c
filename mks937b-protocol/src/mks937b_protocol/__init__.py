"""MKS 937B protocol library.

This package implements the framing and response-verification layer of the
MKS 937B vacuum gauge controller's ASCII command set. It includes:

- Frame codec for addressed query/set frames and ACK/NAK responses
- Reading decoder for numeric and symbolic pressure values
- Validation helpers for parameter ranges and enumerated settings
- A command gateway serializing requests over a half-duplex transport
- Transport protocol and a PyVISA-backed implementation

Typical usage::

    from mks937b_protocol import CommandGateway, VisaTransport, decode_reading

    transport = VisaTransport("ASRL/dev/ttyUSB0::INSTR")
    gateway = CommandGateway(transport, address=1)
    gateway.connect()
    reading = decode_reading(gateway.query("PR1"))
    gateway.disconnect()
"""

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
    InvalidReadingError,
    InvalidResponseValueError,
    InvalidUnitError,
    NegativeAcknowledgeError,
    NotConnectedError,
    ProtocolError,
    UnexpectedAddressError,
    UnexpectedParameterError,
    UnexpectedReplyError,
    ValidationError,
)
from mks937b_protocol.framing import (
    FRAME_TERMINATOR,
    Response,
    Tag,
    decode_response,
    encode_query,
    encode_set,
    verify_query,
    verify_set,
)
from mks937b_protocol.gateway import CommandGateway
from mks937b_protocol.number import (
    format_address,
    format_bool,
    format_exponent,
    format_fixed,
    parse_bool,
    parse_int,
    parse_number,
)
from mks937b_protocol.readings import STATUS_TOKENS, decode_reading, decode_readings
from mks937b_protocol.transport import Transport
from mks937b_protocol.visa import VisaTransport

__all__ = [
    # Errors
    "InvalidAddressError",
    "InvalidBaudRateError",
    "InvalidChannelControlError",
    "InvalidChannelError",
    "InvalidChoiceError",
    "InvalidControlModeError",
    "InvalidCSEError",
    "InvalidEmissionCurrentError",
    "InvalidFilamentError",
    "InvalidGasError",
    "InvalidIntegerError",
    "InvalidParityError",
    "InvalidPROError",
    "InvalidRangeError",
    "InvalidReadingError",
    "InvalidResponseValueError",
    "InvalidUnitError",
    "NegativeAcknowledgeError",
    "NotConnectedError",
    "ProtocolError",
    "UnexpectedAddressError",
    "UnexpectedParameterError",
    "UnexpectedReplyError",
    "ValidationError",
    # Framing
    "FRAME_TERMINATOR",
    "Response",
    "Tag",
    "decode_response",
    "encode_query",
    "encode_set",
    "verify_query",
    "verify_set",
    # Gateway
    "CommandGateway",
    # Number formatting/parsing
    "format_address",
    "format_bool",
    "format_exponent",
    "format_fixed",
    "parse_bool",
    "parse_int",
    "parse_number",
    # Readings
    "STATUS_TOKENS",
    "decode_reading",
    "decode_readings",
    # Transport
    "Transport",
    "VisaTransport",
]
