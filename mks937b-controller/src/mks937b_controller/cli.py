"""Command-line interface for MKS 937B controllers.

Usage:
    # Read all six channels of the controller at address 48
    mks937b --resource TCPIP::10.0.4.135::4001::SOCKET --address 48 pressures

    # Read one channel using a YAML configuration file
    mks937b --config beamline.yaml pressure 3

    # Show serial, unit and control settings
    mks937b --config beamline.yaml info

    # Serve an emulated controller on TCP port 4001
    mks937b emulate --port 4001 --address 48
"""

from __future__ import annotations

import argparse
import logging
import sys

from mks937b_core.errors import Mks937bError
from mks937b_core.types import CONTROL_CHANNELS, PRESSURE_CHANNELS

from mks937b_controller.config import ControllerConfig, load_config
from mks937b_controller.emulator import make_emulator
from mks937b_controller.server import EmulatorServer

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _resolve_config(args: argparse.Namespace) -> ControllerConfig:
    """Build the connection settings from ``--config`` or the flags."""
    if args.config:
        return load_config(args.config)
    if not args.resource:
        raise Mks937bError("either --config or --resource is required")
    return ControllerConfig(
        name=args.resource,
        resource=args.resource,
        address=args.address,
        timeout_ms=args.timeout_ms,
    )


def cmd_pressures(args: argparse.Namespace) -> int:
    """Print the pressure of every channel."""
    config = _resolve_config(args)
    controller = config.create_instrument()
    try:
        readings = controller.get_pressures()
    finally:
        controller.disconnect()

    for channel, reading in zip(PRESSURE_CHANNELS, readings):
        print(f"{config.channel_name(channel)}: {reading}")
    return 0


def cmd_pressure(args: argparse.Namespace) -> int:
    """Print the pressure of one channel."""
    config = _resolve_config(args)
    controller = config.create_instrument()
    try:
        reading = controller.get_pressure(args.channel)
    finally:
        controller.disconnect()

    print(f"{config.channel_name(args.channel)}: {reading}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Print serial, unit and control settings."""
    config = _resolve_config(args)
    controller = config.create_instrument()
    try:
        print(f"Controller: {config.name}")
        print(f"  Address: {controller.get_address():03d}")
        print(f"  Baud rate: {controller.get_baud_rate().value}")
        print(f"  Parity: {controller.get_parity().value}")
        print(f"  Unit: {controller.get_pressure_unit().value}")
        print()
        print("Control channels:")
        for channel in CONTROL_CHANNELS:
            print(
                f"  {config.channel_name(channel)}: "
                f"mode={controller.get_control_mode(channel).value} "
                f"source={controller.get_control_channel(channel).value} "
                f"setpoint={controller.get_target(channel):.2E} "
                f"protection={controller.get_protection_target(channel):.2E}"
            )
    finally:
        controller.disconnect()
    return 0


def cmd_emulate(args: argparse.Namespace) -> int:
    """Serve an emulated controller until interrupted."""
    server = EmulatorServer(make_emulator(address=args.address), host=args.host, port=args.port)
    host, port = server.address
    print(f"Emulating address {args.address:03d}; connect via TCPIP::{host}::{port}::SOCKET")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        server.stop()
    return 0


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        help="YAML configuration file describing the controller"
    )
    parser.add_argument(
        "--resource", "-r",
        help="VISA resource string (e.g., TCPIP::10.0.4.135::4001::SOCKET)"
    )
    parser.add_argument(
        "--address", "-a", type=int, default=1,
        help="Controller address, 1-254 (default: 1)"
    )
    parser.add_argument(
        "--timeout-ms", type=int, default=1000,
        help="Read/write timeout in milliseconds (default: 1000)"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mks937b",
        description="MKS 937B vacuum gauge controller CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    pressures_parser = subparsers.add_parser("pressures", help="Read all channels")
    _add_connection_args(pressures_parser)

    pressure_parser = subparsers.add_parser("pressure", help="Read one channel")
    _add_connection_args(pressure_parser)
    pressure_parser.add_argument("channel", type=int, help="Channel 1-6")

    info_parser = subparsers.add_parser("info", help="Show controller settings")
    _add_connection_args(info_parser)

    emulate_parser = subparsers.add_parser("emulate", help="Serve an emulated controller over TCP")
    emulate_parser.add_argument(
        "--host", default="127.0.0.1",
        help="Bind address (default: 127.0.0.1)"
    )
    emulate_parser.add_argument(
        "--port", type=int, default=4001,
        help="Bind port (default: 4001)"
    )
    emulate_parser.add_argument(
        "--address", "-a", type=int, default=1,
        help="Emulated controller address (default: 1)"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(args.debug)

    commands = {
        "pressures": cmd_pressures,
        "pressure": cmd_pressure,
        "info": cmd_info,
        "emulate": cmd_emulate,
    }
    try:
        return commands[args.command](args)
    except (Mks937bError, FileNotFoundError) as exc:
        print(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
