"""TCP server exposing an MKS 937B emulator.

Serves a :class:`~mks937b_controller.emulator.Mks937bEmulator` over TCP the
way a serial-to-Ethernet terminal server exposes a real controller, so a
:class:`~mks937b_protocol.visa.VisaTransport` (``TCPIP::host::port::SOCKET``),
telnet or netcat can talk to it.

Example:
    Start an emulator server on an ephemeral port::

        from mks937b_controller import EmulatorServer, make_emulator

        server = EmulatorServer(make_emulator(address=48), port=0)
        server.start()

        host, port = server.address
        print(f"Connect via: TCPIP::{host}::{port}::SOCKET")

        # printf '@048PR1?;FF' | nc localhost {port}
        # @048ACK5.20E-07;FF

        server.stop()
"""

from __future__ import annotations

import logging
import socketserver
import threading
from typing import Any

from mks937b_core.errors import TransportError
from mks937b_protocol.framing import TERMINATOR_BYTES

from mks937b_controller.emulator import Mks937bEmulator

logger = logging.getLogger(__name__)


class _FrameRequestHandler(socketserver.BaseRequestHandler):
    """Handle one TCP connection, forwarding frames to the emulator.

    Bytes are buffered until a ``;FF`` terminator arrives; each complete
    frame is written to the emulator and its reply, if any, sent back. A
    frame the emulator does not answer produces no bytes, as on the wire.
    """

    server: _EmulatorTcpServer

    def handle(self) -> None:
        """Process incoming frames until the client closes the connection."""
        buffer = b""
        while True:
            chunk = self.request.recv(1024)
            if not chunk:
                break
            buffer += chunk
            while TERMINATOR_BYTES in buffer:
                frame, _, buffer = buffer.partition(TERMINATOR_BYTES)
                self._respond(frame + TERMINATOR_BYTES)

    def _respond(self, frame: bytes) -> None:
        emulator = self.server.emulator
        with self.server.lock:
            emulator.write(frame)
            try:
                reply = emulator.read_until(TERMINATOR_BYTES)
            except TransportError:
                logger.debug("No reply to %r", frame)
                return
        self.request.sendall(reply)


class _EmulatorTcpServer(socketserver.TCPServer):
    """TCPServer subclass that holds a reference to the emulator.

    Attributes:
        allow_reuse_address: Set to True to allow quick server restart.
        emulator: The emulator to serve.
        lock: Serializes write/read pairs on the shared emulator.
    """

    allow_reuse_address = True

    def __init__(
        self,
        server_address: tuple[str, int],
        emulator: Mks937bEmulator,
        **kwargs: Any,
    ) -> None:
        self.emulator = emulator
        self.lock = threading.Lock()
        super().__init__(server_address, _FrameRequestHandler, **kwargs)


class EmulatorServer:
    """TCP server wrapping an emulator for external access.

    Runs a TCP server in a background daemon thread. The server handles one
    client connection at a time, like the single RS-232 line it stands in
    for.

    Args:
        emulator: The emulator to serve. It is connected on :meth:`start`.
        host: Bind address (default ``"127.0.0.1"``).
        port: Bind port (default ``4001``). Use ``0`` for an OS-assigned
            ephemeral port.
    """

    def __init__(
        self,
        emulator: Mks937bEmulator,
        host: str = "127.0.0.1",
        port: int = 4001,
    ) -> None:
        self._server = _EmulatorTcpServer((host, port), emulator)
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Connect the emulator and start serving in a daemon thread."""
        self._server.emulator.connect()
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info("Emulator listening on %s:%d", *self.address)

    def serve_forever(self) -> None:
        """Connect the emulator and serve in the calling thread until shut down."""
        self._server.emulator.connect()
        logger.info("Emulator listening on %s:%d", *self.address)
        self._server.serve_forever()

    def stop(self) -> None:
        """Shut down the server and wait for the thread to exit."""
        if self._thread is not None:
            self._server.shutdown()
            self._thread.join()
            self._thread = None
        self._server.server_close()
        self._server.emulator.disconnect()

    @property
    def address(self) -> tuple[str, int]:
        """Return the actual bound ``(host, port)`` address.

        Returns:
            Tuple of (host, port) where the server is listening.
        """
        addr = self._server.server_address
        return (str(addr[0]), int(addr[1]))
