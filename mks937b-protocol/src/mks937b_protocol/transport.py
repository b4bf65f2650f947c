"""Transport protocol definition.

This module defines the :class:`Transport` protocol, the interface the
:class:`~mks937b_protocol.gateway.CommandGateway` needs from the physical
link. Transports own everything below the frame level: port or socket
handling, timeouts and byte delimiting.

Implementations include:
- :class:`mks937b_protocol.VisaTransport`: PyVISA-backed serial/TCP transport
- :class:`mks937b_controller.Mks937bEmulator`: in-process device emulator
"""

from __future__ import annotations

from typing import Protocol


class Transport(Protocol):
    """Protocol for a half-duplex byte transport.

    This is a structural subtyping protocol (duck typing). Any class that
    implements these five methods with the correct signatures is a valid
    transport. Failures are reported by raising, typically
    :class:`mks937b_core.errors.TransportError`.

    Example:
        >>> class LoopbackTransport:
        ...     def connect(self) -> None: ...
        ...     def disconnect(self) -> None: ...
        ...     def is_connected(self) -> bool:
        ...         return True
        ...     def write(self, data: bytes) -> None: ...
        ...     def read_until(self, delimiter: bytes) -> bytes:
        ...         return b"@001ACK9600;FF"
        ...
        >>> transport: Transport = LoopbackTransport()  # Type checks OK
    """

    def connect(self) -> None:
        """Open the link."""
        ...

    def disconnect(self) -> None:
        """Close the link and release resources."""
        ...

    def is_connected(self) -> bool:
        """Return True if the link is open."""
        ...

    def write(self, data: bytes) -> None:
        """Send raw bytes to the device.

        Args:
            data: A complete request frame.
        """
        ...

    def read_until(self, delimiter: bytes) -> bytes:
        """Read from the device up to and including *delimiter*.

        Args:
            delimiter: Byte sequence that ends a response (``b";FF"``).

        Returns:
            The bytes read, including the delimiter.
        """
        ...
