"""MKS 937B vacuum gauge controller driver and emulator.

This package provides the high-level driver for the MKS 937B multi-sensor
controller together with an in-process emulator for testing without
hardware.

Modules:
    controller: High-level driver with typed get/set methods.
    config: YAML configuration for controller connections.
    emulator: In-process emulator implementing the transport protocol.
    server: TCP server for exposing the emulator to external tools.
    cli: ``mks937b`` command-line entry point.

Example:
    Connect to a real controller::

        from mks937b_controller import create_instrument

        gauge = create_instrument("TCPIP::10.0.4.135::4001::SOCKET", address=48)
        print(gauge.get_pressures())
        gauge.set_target(1, 4.5e-3)

    Use an emulator for testing::

        from mks937b_controller import Mks937b, make_emulator
        from mks937b_protocol import CommandGateway

        gauge = Mks937b(CommandGateway(make_emulator(address=48), 48))
        gauge.connect()
"""

from mks937b_controller.config import (
    ChannelConfig,
    ControllerConfig,
    load_config,
    parse_config,
)
from mks937b_controller.controller import Mks937b, create_instrument
from mks937b_controller.emulator import (
    Mks937bEmulator,
    Mks937bEmulatorConfig,
    make_emulator,
)
from mks937b_controller.server import EmulatorServer

__all__ = [
    # Configuration
    "ChannelConfig",
    "ControllerConfig",
    "load_config",
    "parse_config",
    # Driver
    "Mks937b",
    "create_instrument",
    # Emulator
    "Mks937bEmulator",
    "Mks937bEmulatorConfig",
    "make_emulator",
    # Server
    "EmulatorServer",
]
