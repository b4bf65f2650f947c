"""Unit tests for controller configuration loading."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from mks937b_core.errors import ConfigError
from mks937b_core.types import BaudRate

from mks937b_controller.config import (
    ChannelConfig,
    ControllerConfig,
    load_config,
    parse_config,
)

_FULL_YAML = """\
controller:
  name: "beamline-3"
  resource: "TCPIP::10.0.4.135::4001::SOCKET"
  address: 48
  timeout_ms: 500
  baud_rate: 19200
  channels:
    - id: 1
      logical_name: "chamber_cc"
    - id: 3
      logical_name: "foreline_pirani"
      location: "rack B"
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "controller.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestChannelConfig:
    def test_frozen(self) -> None:
        channel = ChannelConfig(id=1, logical_name="chamber_cc")
        with pytest.raises(AttributeError):
            channel.logical_name = "other"  # type: ignore[misc]

    def test_metadata_default(self) -> None:
        assert ChannelConfig(id=1, logical_name="x").metadata == {}


class TestControllerConfig:
    def test_defaults(self) -> None:
        config = ControllerConfig(name="g", resource="ASRL1::INSTR", address=1)
        assert config.timeout_ms == 1000
        assert config.baud_rate is BaudRate.B9600
        assert config.channels == ()

    def test_channel_name(self) -> None:
        config = ControllerConfig(
            name="g",
            resource="ASRL1::INSTR",
            address=1,
            channels=(ChannelConfig(id=3, logical_name="foreline"),),
        )
        assert config.channel_name(3) == "foreline"
        assert config.channel_name(4) == "CH4"

    def test_create_instrument(self) -> None:
        config = ControllerConfig(name="g", resource="ASRL1::INSTR", address=7, timeout_ms=250)
        with patch("mks937b_controller.controller.VisaTransport") as mock_cls:
            gauge = config.create_instrument(connect=False)
        mock_cls.assert_called_once_with("ASRL1::INSTR", timeout_ms=250, baud_rate=BaudRate.B9600)
        assert gauge.address == 7


class TestParseConfig:
    def test_minimal(self) -> None:
        config = parse_config({"controller": {"resource": "ASRL1::INSTR", "address": 5}})
        assert config.name == "mks937b-005"
        assert config.address == 5

    def test_missing_section(self) -> None:
        with pytest.raises(ConfigError, match="'controller' mapping"):
            parse_config({"rack": {}})

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ConfigError):
            parse_config(None)

    def test_missing_resource(self) -> None:
        with pytest.raises(ConfigError, match="resource"):
            parse_config({"controller": {"address": 1}})

    def test_missing_address(self) -> None:
        with pytest.raises(ConfigError, match="address"):
            parse_config({"controller": {"resource": "ASRL1::INSTR"}})

    def test_invalid_address(self) -> None:
        with pytest.raises(ConfigError, match="between 1 and 254"):
            parse_config({"controller": {"resource": "ASRL1::INSTR", "address": 300}})

    def test_invalid_baud_rate(self) -> None:
        with pytest.raises(ConfigError, match="baud rate"):
            parse_config({"controller": {"resource": "ASRL1::INSTR", "address": 1, "baud_rate": 4800}})

    def test_invalid_timeout(self) -> None:
        with pytest.raises(ConfigError, match="timeout_ms"):
            parse_config({"controller": {"resource": "ASRL1::INSTR", "address": 1, "timeout_ms": 0}})

    def test_channel_out_of_range(self) -> None:
        data = {
            "controller": {
                "resource": "ASRL1::INSTR",
                "address": 1,
                "channels": [{"id": 7, "logical_name": "x"}],
            }
        }
        with pytest.raises(ConfigError, match="channel"):
            parse_config(data)

    def test_duplicate_channel(self) -> None:
        data = {
            "controller": {
                "resource": "ASRL1::INSTR",
                "address": 1,
                "channels": [{"id": 1, "logical_name": "a"}, {"id": 1, "logical_name": "b"}],
            }
        }
        with pytest.raises(ConfigError, match="more than once"):
            parse_config(data)

    def test_channel_missing_name(self) -> None:
        data = {"controller": {"resource": "ASRL1::INSTR", "address": 1, "channels": [{"id": 1}]}}
        with pytest.raises(ConfigError, match="logical_name"):
            parse_config(data)


class TestLoadConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, _FULL_YAML))
        assert config.name == "beamline-3"
        assert config.resource == "TCPIP::10.0.4.135::4001::SOCKET"
        assert config.address == 48
        assert config.timeout_ms == 500
        assert config.baud_rate is BaudRate.B19200
        assert [c.logical_name for c in config.channels] == ["chamber_cc", "foreline_pirani"]
        assert config.channels[1].metadata == {"location": "rack B"}

    def test_accepts_str_path(self, tmp_path: Path) -> None:
        config = load_config(str(_write(tmp_path, _FULL_YAML)))
        assert config.address == 48

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(_write(tmp_path, "controller: [unclosed\n"))

    def test_empty_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path, ""))
