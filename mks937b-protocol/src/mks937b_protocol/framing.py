"""Frame codec for the MKS 937B ASCII protocol.

Every exchange is one request frame followed by one response frame::

    query     @AAAMMM?;FF
    set       @AAAMMM!PPP;FF
    response  @AAAACKRRR;FF   or   @AAANAKRRR;FF

``AAA`` is the zero-padded controller address, ``MMM`` the command mnemonic
(which may embed a channel digit, e.g. ``PR1`` or ``CSP3``), ``PPP`` the set
parameter and ``RRR`` the returned value (query) or echoed parameter (set).
For a NAK response ``RRR`` is the controller's error code.

Typical usage::

    frame = encode_query(48, "PR1")          # b"@048PR1?;FF"
    response = decode_response(raw, sent=frame)
    value = verify_query(response, 48)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from mks937b_core.types import MAX_ADDRESS, MIN_ADDRESS

from mks937b_protocol.errors import (
    InvalidAddressError,
    NegativeAcknowledgeError,
    UnexpectedAddressError,
    UnexpectedParameterError,
    UnexpectedReplyError,
)
from mks937b_protocol.number import format_address

FRAME_START = "@"
FRAME_TERMINATOR = ";FF"
TERMINATOR_BYTES = FRAME_TERMINATOR.encode("ascii")
QUERY_OPERATOR = "?"
SET_OPERATOR = "!"

ENCODING = "ascii"

_MNEMONIC_RE = re.compile(r"[A-Z0-9]{1,4}")

# Matches a full response body: address digits, ACK/NAK tag, payload, terminator.
_RESPONSE_RE = re.compile(r"@([0-9]+)(ACK|NAK)(.*);FF", re.DOTALL)


class Tag(Enum):
    """Acknowledgement tag carried by a response frame."""

    ACK = "ACK"
    NAK = "NAK"


@dataclass(frozen=True)
class Response:
    """A decoded response frame.

    Attributes:
        address: Address digits exactly as received.
        tag: ACK or NAK.
        parameter: Returned value, echoed parameter or NAK code.
        sent: The request frame this response answers, for error reporting.
    """

    address: str
    tag: Tag
    parameter: str
    sent: str = ""

    @property
    def acknowledged(self) -> bool:
        """Return True for an ACK response."""
        return self.tag is Tag.ACK


def _check_address(address: int) -> str:
    if isinstance(address, bool) or not MIN_ADDRESS <= address <= MAX_ADDRESS:
        raise InvalidAddressError(address)
    return format_address(address)


def _check_mnemonic(mnemonic: str) -> None:
    if _MNEMONIC_RE.fullmatch(mnemonic) is None:
        raise ValueError(f"Invalid command mnemonic: {mnemonic!r}")


def encode_query(address: int, mnemonic: str) -> bytes:
    """Build a query frame.

    Args:
        address: Controller address (1-254).
        mnemonic: Command mnemonic, e.g. ``"PR1"``.

    Returns:
        The ASCII frame ``@AAAMMM?;FF``.

    Raises:
        InvalidAddressError: If *address* is outside 1-254.
        ValueError: If *mnemonic* is not 1-4 upper-case alphanumerics.
    """
    padded = _check_address(address)
    _check_mnemonic(mnemonic)
    frame = f"{FRAME_START}{padded}{mnemonic}{QUERY_OPERATOR}{FRAME_TERMINATOR}"
    return frame.encode(ENCODING)


def encode_set(address: int, mnemonic: str, parameter: str) -> bytes:
    """Build a set frame.

    Args:
        address: Controller address (1-254).
        mnemonic: Command mnemonic, e.g. ``"CSP3"``.
        parameter: Parameter text in the controller's expected encoding.

    Returns:
        The ASCII frame ``@AAAMMM!PPP;FF``.

    Raises:
        InvalidAddressError: If *address* is outside 1-254.
        ValueError: If *mnemonic* is malformed, or *parameter* is empty,
            non-ASCII, or contains frame delimiters.
    """
    padded = _check_address(address)
    _check_mnemonic(mnemonic)
    if not parameter:
        raise ValueError("Set parameter must be non-empty")
    if FRAME_TERMINATOR in parameter or FRAME_START in parameter or not parameter.isascii():
        raise ValueError(f"Invalid set parameter: {parameter!r}")
    frame = f"{FRAME_START}{padded}{mnemonic}{SET_OPERATOR}{parameter}{FRAME_TERMINATOR}"
    return frame.encode(ENCODING)


def decode_response(raw: bytes | str, sent: bytes | str = b"") -> Response:
    """Decode a response frame.

    The whole body, ignoring surrounding whitespace, must match
    ``@<digits>(ACK|NAK)<anything>;FF``.

    Args:
        raw: Bytes (or text) read from the transport up to the terminator.
        sent: The request frame, used only for error reporting.

    Returns:
        The decoded :class:`Response`.

    Raises:
        UnexpectedReplyError: If the body does not match the frame grammar.
    """
    sent_text = sent.decode(ENCODING, errors="replace") if isinstance(sent, bytes) else sent
    text = raw.decode(ENCODING, errors="replace") if isinstance(raw, bytes) else raw
    match = _RESPONSE_RE.fullmatch(text.strip())
    if match is None:
        raise UnexpectedReplyError(sent_text, text)
    return Response(
        address=match.group(1),
        tag=Tag(match.group(2)),
        parameter=match.group(3),
        sent=sent_text,
    )


def _verify_common(response: Response, address: int) -> None:
    expected = format_address(address)
    if response.address != expected:
        raise UnexpectedAddressError(expected, response.address)
    if not response.acknowledged:
        raise NegativeAcknowledgeError(response.sent, response.parameter)


def verify_query(response: Response, address: int) -> str:
    """Check a query response and return its value.

    Args:
        response: The decoded response.
        address: Address the query was sent to.

    Returns:
        The returned value, verbatim.

    Raises:
        UnexpectedAddressError: If the response address differs.
        NegativeAcknowledgeError: If the controller answered NAK.
    """
    _verify_common(response, address)
    return response.parameter


def verify_set(response: Response, address: int, parameter: str) -> None:
    """Check a set acknowledgement.

    The echoed parameter is the only positive confirmation that the write
    took effect, so it must equal the sent parameter string-exactly.

    Args:
        response: The decoded response.
        address: Address the set was sent to.
        parameter: Parameter string that was sent.

    Raises:
        UnexpectedAddressError: If the response address differs.
        NegativeAcknowledgeError: If the controller answered NAK.
        UnexpectedParameterError: If the echo differs from *parameter*.
    """
    _verify_common(response, address)
    if response.parameter != parameter:
        raise UnexpectedParameterError(parameter, response.parameter)
