"""PyVISA transport for MKS 937B controllers.

The 937B talks RS-232/RS-485, usually reached either directly through a
serial port or through a serial-to-Ethernet terminal server. PyVISA covers
both with one API; the library is imported lazily so the rest of the
package works without it installed.

Supported resource string formats include:
- Serial: ``ASRL/dev/ttyUSB0::INSTR`` or ``ASRL1::INSTR``
- TCP socket: ``TCPIP::10.0.4.135::4001::SOCKET``
"""

from __future__ import annotations

import logging
from typing import Any

from mks937b_core.errors import TransportError
from mks937b_core.types import BaudRate

logger = logging.getLogger(__name__)


class VisaTransport:
    """Transport backed by PyVISA.

    Implements the :class:`~mks937b_protocol.transport.Transport` protocol
    and can be passed to :class:`~mks937b_protocol.gateway.CommandGateway`.
    Read termination is set per call from the delimiter the gateway asks for;
    nothing is appended on write since request frames are already complete.

    Args:
        resource_string: VISA resource address.
        timeout_ms: I/O timeout in milliseconds (applied on connect).
        baud_rate: Serial baud rate, applied to ``ASRL`` resources only.

    Example:
        >>> transport = VisaTransport("TCPIP::10.0.4.135::4001::SOCKET", timeout_ms=500)
        >>> transport.connect()
        >>> transport.write(b"@048PR1?;FF")
        >>> transport.read_until(b";FF")
        b'@048ACK4.50E-03;FF'
    """

    def __init__(
        self,
        resource_string: str,
        *,
        timeout_ms: int = 1000,
        baud_rate: BaudRate | int = BaudRate.B9600,
    ) -> None:
        self._resource_string = resource_string
        self._timeout_ms = timeout_ms
        self._baud_rate = int(baud_rate)
        self._rm: Any = None
        self._resource: Any = None

    # -- Properties ----------------------------------------------------------

    @property
    def resource_string(self) -> str:
        """The VISA resource string."""
        return self._resource_string

    @property
    def is_serial(self) -> bool:
        """Return True for serial (``ASRL``) resources."""
        return self._resource_string.upper().startswith("ASRL")

    # -- Lifecycle -----------------------------------------------------------

    def connect(self) -> None:
        """Open the VISA resource.

        Lazily imports ``pyvisa`` and creates a ``ResourceManager``. Serial
        resources are configured for 8 data bits, no parity, 1 stop bit.

        Raises:
            TransportError: If ``pyvisa`` is not installed or the resource
                cannot be opened.
        """
        if self._resource is not None:
            return

        try:
            import pyvisa  # type: ignore[import-not-found]  # pylint: disable=import-outside-toplevel
        except ImportError as exc:
            raise TransportError(
                "pyvisa library is not installed. Install with: pip install pyvisa"
            ) from exc

        try:
            self._rm = pyvisa.ResourceManager()
            self._resource = self._rm.open_resource(
                self._resource_string,
                write_termination="",
            )
            self._resource.timeout = self._timeout_ms
            if self.is_serial:
                self._resource.baud_rate = self._baud_rate
                self._resource.data_bits = 8
        except Exception as exc:
            self._resource = None
            if self._rm is not None:
                try:
                    self._rm.close()
                except Exception:  # pylint: disable=broad-except
                    logger.debug("Ignoring error closing resource manager", exc_info=True)
            self._rm = None
            raise TransportError(
                f"Failed to open VISA resource {self._resource_string!r}: {exc}"
            ) from exc
        logger.info("Opened VISA resource %s", self._resource_string)

    def disconnect(self) -> None:
        """Close the VISA resource and resource manager.

        Safe to call multiple times.
        """
        if self._resource is not None:
            try:
                self._resource.close()
            except Exception:  # pylint: disable=broad-except
                logger.debug("Ignoring error closing %s", self._resource_string, exc_info=True)
            self._resource = None
            logger.info("Closed VISA resource %s", self._resource_string)
        if self._rm is not None:
            try:
                self._rm.close()
            except Exception:  # pylint: disable=broad-except
                logger.debug("Ignoring error closing resource manager", exc_info=True)
            self._rm = None

    def is_connected(self) -> bool:
        """Return True if the resource is currently open."""
        return self._resource is not None

    # -- Transport interface -------------------------------------------------

    def write(self, data: bytes) -> None:
        """Send raw bytes to the controller.

        Raises:
            TransportError: If the resource is not open or the write fails.
        """
        resource = self._require_open()
        try:
            resource.write_raw(data)
        except Exception as exc:
            raise TransportError(f"Write to {self._resource_string!r} failed: {exc}") from exc

    def read_until(self, delimiter: bytes) -> bytes:
        """Read up to and including *delimiter*.

        Raises:
            TransportError: If the resource is not open, or the read fails or
                times out.
        """
        resource = self._require_open()
        termination = delimiter.decode("ascii")
        resource.read_termination = termination
        try:
            message: str = resource.read()
        except Exception as exc:
            raise TransportError(f"Read from {self._resource_string!r} failed: {exc}") from exc
        return message.encode("ascii") + delimiter

    # -- Private helpers -----------------------------------------------------

    def _require_open(self) -> Any:
        if self._resource is None:
            raise TransportError("VISA resource is not open")
        return self._resource
