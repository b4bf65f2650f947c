"""YAML configuration loading for MKS 937B controllers.

Describes how to reach a controller and how to label its channels.

Example YAML configuration:
    controller:
      name: "beamline-3"
      resource: "TCPIP::10.0.4.135::4001::SOCKET"
      address: 48
      timeout_ms: 500
      baud_rate: 9600
      channels:
        - id: 1
          logical_name: "chamber_cc"
        - id: 3
          logical_name: "foreline_pirani"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mks937b_core.errors import ConfigError
from mks937b_core.types import PRESSURE_CHANNELS, BaudRate
from mks937b_protocol.errors import ValidationError
from mks937b_protocol.validation import coerce_baud_rate, validate_address, validate_channel

from mks937b_controller.controller import Mks937b, create_instrument


@dataclass(frozen=True)
class ChannelConfig:
    """Logical name for a pressure channel.

    Attributes:
        id: Physical channel on the controller (1-6).
        logical_name: Name used in reports (e.g. "chamber_cc").
        metadata: Additional channel-specific settings.
    """

    id: int
    logical_name: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ControllerConfig:
    """How to reach one controller.

    Attributes:
        name: Human-readable controller name.
        resource: VISA resource string.
        address: Controller address (1-254).
        timeout_ms: Read/write timeout in milliseconds.
        baud_rate: Serial baud rate.
        channels: Logical channel names.
    """

    name: str
    resource: str
    address: int
    timeout_ms: int = 1000
    baud_rate: BaudRate = BaudRate.B9600
    channels: tuple[ChannelConfig, ...] = field(default_factory=tuple)

    def channel_name(self, channel: int) -> str:
        """Return the logical name of *channel*, or ``CH<n>`` if unnamed."""
        for ch in self.channels:
            if ch.id == channel:
                return ch.logical_name
        return f"CH{channel}"

    def create_instrument(self, *, connect: bool = True) -> Mks937b:
        """Build a driver for this controller.

        Args:
            connect: Open the transport before returning.
        """
        return create_instrument(
            self.resource,
            self.address,
            timeout_ms=self.timeout_ms,
            baud_rate=self.baud_rate,
            connect=connect,
        )


def _parse_channels(raw: Any) -> tuple[ChannelConfig, ...]:
    """Parse the ``channels`` list.

    Args:
        raw: The YAML value under ``channels``.

    Returns:
        Tuple of ChannelConfig objects.

    Raises:
        ConfigError: If an entry is malformed or a channel is repeated.
    """
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigError("'channels' must be a list")

    channels: list[ChannelConfig] = []
    seen: set[int] = set()
    for ch_data in raw:
        if not isinstance(ch_data, dict):
            raise ConfigError(f"Channel entry must be a mapping, got {ch_data!r}")

        ch_id = ch_data.get("id")
        logical_name = ch_data.get("logical_name") or ch_data.get("name")
        if ch_id is None or logical_name is None:
            raise ConfigError(f"Channel entry needs 'id' and 'logical_name': {ch_data!r}")
        try:
            validate_channel(ch_id, PRESSURE_CHANNELS[0], PRESSURE_CHANNELS[-1])
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
        if ch_id in seen:
            raise ConfigError(f"Channel {ch_id} configured more than once")
        seen.add(ch_id)

        metadata = {k: v for k, v in ch_data.items() if k not in ("id", "logical_name", "name")}
        channels.append(ChannelConfig(id=ch_id, logical_name=str(logical_name), metadata=metadata))

    return tuple(channels)


def parse_config(data: Any) -> ControllerConfig:
    """Parse configuration from a dictionary.

    Args:
        data: Parsed YAML data with a top-level ``controller`` mapping.

    Returns:
        Parsed ControllerConfig.

    Raises:
        ConfigError: If required fields are missing or invalid.
    """
    if not isinstance(data, dict) or not isinstance(data.get("controller"), dict):
        raise ConfigError("Configuration must contain a 'controller' mapping")
    section: dict[str, Any] = data["controller"]

    resource = section.get("resource")
    if not resource:
        raise ConfigError("'controller.resource' is required")
    if "address" not in section:
        raise ConfigError("'controller.address' is required")

    try:
        address = validate_address(section["address"])
        baud_rate = coerce_baud_rate(section.get("baud_rate", BaudRate.B9600))
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    timeout_ms = section.get("timeout_ms", 1000)
    if not isinstance(timeout_ms, int) or timeout_ms <= 0:
        raise ConfigError(f"'controller.timeout_ms' must be a positive integer, got {timeout_ms!r}")

    return ControllerConfig(
        name=str(section.get("name", f"mks937b-{address:03d}")),
        resource=str(resource),
        address=address,
        timeout_ms=timeout_ms,
        baud_rate=baud_rate,
        channels=_parse_channels(section.get("channels")),
    )


def load_config(path: str | Path) -> ControllerConfig:
    """Load controller configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Parsed ControllerConfig.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the YAML is malformed or fields are invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    return parse_config(data)
