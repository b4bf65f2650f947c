"""Command gateway serializing all traffic to one controller.

This module provides the :class:`CommandGateway` class, which owns the
controller address and the transport, and runs every query and set through
the frame codec under a single-outstanding-request discipline.

The serial line is half-duplex: interleaving a second request between a
write and its read would attribute a reply to the wrong command. One lock per
gateway is therefore held for the whole round trip (encode, write, read up to
the terminator, decode and verify). Callers on other threads block until it
is released; gateways for different controllers never share a lock.

Typical usage::

    from mks937b_protocol import CommandGateway, VisaTransport

    transport = VisaTransport("TCPIP::10.0.4.135::4001::SOCKET", timeout_ms=500)
    gateway = CommandGateway(transport, address=48)
    gateway.connect()

    value = gateway.query("PR1")
    gateway.set("CSP1", "5.00E-03")

    gateway.disconnect()
"""

from __future__ import annotations

import logging
import threading
from types import TracebackType
from typing import TYPE_CHECKING

from mks937b_protocol.errors import NotConnectedError
from mks937b_protocol.framing import (
    TERMINATOR_BYTES,
    decode_response,
    encode_query,
    encode_set,
    verify_query,
    verify_set,
)
from mks937b_protocol.validation import validate_address

if TYPE_CHECKING:
    from mks937b_protocol.transport import Transport

logger = logging.getLogger(__name__)


class CommandGateway:
    """Single point through which every request to a controller passes.

    The address is fixed for the life of the gateway and is validated on
    :meth:`connect`, before any I/O. Transport exceptions (including read
    timeouts) propagate unchanged; nothing is retried.

    Attributes:
        address: Controller address (1-254).

    Args:
        transport: A :class:`~mks937b_protocol.transport.Transport`.
        address: Controller address used in every frame.

    Example:
        >>> gateway = CommandGateway(transport, address=1)
        >>> gateway.connect()
        >>> gateway.query("U")
        'Torr'
    """

    def __init__(self, transport: Transport, address: int) -> None:
        self._transport = transport
        self._address = address
        self._lock = threading.Lock()

    @property
    def address(self) -> int:
        """The controller address used in every frame."""
        return self._address

    # -- Lifecycle -----------------------------------------------------------

    def connect(self) -> None:
        """Open the transport.

        Raises:
            InvalidAddressError: If the address is outside 1-254. No I/O
                is performed in that case.
        """
        validate_address(self._address)
        with self._lock:
            self._transport.connect()
        logger.info("Connected to controller at address %03d", self._address)

    def disconnect(self) -> None:
        """Close the transport."""
        with self._lock:
            self._transport.disconnect()
        logger.info("Disconnected from controller at address %03d", self._address)

    def is_connected(self) -> bool:
        """Return True if the transport is open."""
        with self._lock:
            return self._transport.is_connected()

    def __enter__(self) -> CommandGateway:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.disconnect()

    # -- Core operations -----------------------------------------------------

    def query(self, mnemonic: str) -> str:
        """Query a value from the controller.

        Args:
            mnemonic: Command mnemonic (e.g. ``"PR1"``).

        Returns:
            The returned value string, verbatim.

        Raises:
            NotConnectedError: If the transport is not connected.
            UnexpectedReplyError: If the response is not a valid frame.
            UnexpectedAddressError: If another address answered.
            NegativeAcknowledgeError: If the controller answered NAK.
        """
        if not self.is_connected():
            raise NotConnectedError()

        with self._lock:
            frame = encode_query(self._address, mnemonic)
            raw = self._exchange(frame)
            response = decode_response(raw, sent=frame)
            return verify_query(response, self._address)

    def set(self, mnemonic: str, parameter: str) -> None:
        """Set a value on the controller.

        The set is only considered successful when the controller echoes
        *parameter* back unchanged.

        Args:
            mnemonic: Command mnemonic (e.g. ``"CSP1"``).
            parameter: Parameter text, already in the device's encoding.

        Raises:
            NotConnectedError: If the transport is not connected.
            UnexpectedReplyError: If the response is not a valid frame.
            UnexpectedAddressError: If another address answered.
            NegativeAcknowledgeError: If the controller answered NAK.
            UnexpectedParameterError: If the echoed parameter differs.
        """
        if not self.is_connected():
            raise NotConnectedError()

        with self._lock:
            frame = encode_set(self._address, mnemonic, parameter)
            raw = self._exchange(frame)
            response = decode_response(raw, sent=frame)
            verify_set(response, self._address, parameter)

    # -- Private helpers -----------------------------------------------------

    def _exchange(self, frame: bytes) -> bytes:
        """Write one frame and read one response (must hold lock)."""
        logger.debug("TX %r", frame)
        self._transport.write(frame)
        raw = self._transport.read_until(TERMINATOR_BYTES)
        logger.debug("RX %r", raw)
        return raw
