"""Tests for the mks937b command-line interface."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from mks937b_protocol import CommandGateway

from mks937b_controller import cli
from mks937b_controller import config as config_module
from mks937b_controller.controller import Mks937b
from mks937b_controller.emulator import Mks937bEmulator, make_emulator


class _Factory:
    """Stand-in for create_instrument that wires a driver to an emulator."""

    def __init__(self, emulator: Mks937bEmulator) -> None:
        self.emulator = emulator
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

    def __call__(self, *args: Any, **kwargs: Any) -> Mks937b:
        self.calls.append((args, kwargs))
        gauge = Mks937b(CommandGateway(self.emulator, args[1]))
        gauge.connect()
        return gauge


@pytest.fixture
def factory() -> Iterator[_Factory]:
    emu = make_emulator()
    with patch.object(config_module, "create_instrument", _Factory(emu)) as fake:
        yield fake


class TestPressures:
    def test_prints_all_channels(self, factory: _Factory, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["pressures", "--resource", "ASRL1::INSTR"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "CH1: 5.20E-07"
        assert out[3] == "CH4: Controller unable to determine sensor connection"
        assert len(out) == 6

    def test_disconnects_after_read(self, factory: _Factory) -> None:
        cli.main(["pressures", "--resource", "ASRL1::INSTR"])
        assert not factory.emulator.is_connected()

    def test_connection_options_forwarded(self, factory: _Factory) -> None:
        cli.main(["pressures", "-r", "ASRL1::INSTR", "-a", "1", "--timeout-ms", "250"])
        args, kwargs = factory.calls[0]
        assert args == ("ASRL1::INSTR", 1)
        assert kwargs["timeout_ms"] == 250

    def test_uses_config_channel_names(
        self, factory: _Factory, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "gauge.yaml"
        path.write_text(
            "controller:\n"
            "  resource: ASRL1::INSTR\n"
            "  address: 1\n"
            "  channels:\n"
            "    - id: 1\n"
            "      logical_name: chamber_cc\n",
            encoding="utf-8",
        )
        assert cli.main(["pressures", "--config", str(path)]) == 0
        assert capsys.readouterr().out.splitlines()[0] == "chamber_cc: 5.20E-07"


class TestPressure:
    def test_single_channel(self, factory: _Factory, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["pressure", "-r", "ASRL1::INSTR", "3"]) == 0
        assert capsys.readouterr().out.strip() == "CH3: 1.00E-03"

    def test_invalid_channel(self, factory: _Factory, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["pressure", "-r", "ASRL1::INSTR", "9"]) == 1
        assert capsys.readouterr().out.startswith("Error: channel must be")


class TestInfo:
    def test_prints_settings(self, factory: _Factory, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["info", "-r", "ASRL1::INSTR"]) == 0
        out = capsys.readouterr().out
        assert "Address: 001" in out
        assert "Baud rate: 9600" in out
        assert "Unit: Torr" in out
        assert "CH5: mode=SAFE source=OFF setpoint=5.00E-03 protection=5.00E-03" in out


class TestErrors:
    def test_no_command(self) -> None:
        assert cli.main([]) == 1

    def test_missing_resource(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["pressures"]) == 1
        assert "either --config or --resource" in capsys.readouterr().out

    def test_missing_config_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["info", "--config", str(tmp_path / "absent.yaml")]) == 1
        assert capsys.readouterr().out.startswith("Error: Configuration file not found")

    def test_protocol_error(self, factory: _Factory, capsys: pytest.CaptureFixture[str]) -> None:
        factory.emulator.inject_reply("garbage")
        assert cli.main(["pressures", "-r", "ASRL1::INSTR"]) == 1
        assert "unexpected response" in capsys.readouterr().out

    def test_malformed_value(self, factory: _Factory, capsys: pytest.CaptureFixture[str]) -> None:
        factory.emulator.inject_reply("@001ACKabc;FF")
        assert cli.main(["info", "-r", "ASRL1::INSTR"]) == 1
        lines = capsys.readouterr().out.splitlines()
        assert lines[-1] == "Error: invalid value for AD: 'abc'"

    def test_malformed_value_disconnects(self, factory: _Factory) -> None:
        factory.emulator.inject_reply("@001ACKabc;FF")
        cli.main(["info", "-r", "ASRL1::INSTR"])
        assert not factory.emulator.is_connected()


class TestEmulate:
    def test_serves_until_interrupted(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.object(cli, "EmulatorServer") as mock_cls:
            server = mock_cls.return_value
            server.address = ("127.0.0.1", 4001)
            server.serve_forever.side_effect = KeyboardInterrupt
            assert cli.main(["emulate", "--port", "4001", "--address", "48"]) == 0
        server.stop.assert_called_once()
        _, kwargs = mock_cls.call_args
        assert kwargs == {"host": "127.0.0.1", "port": 4001}
        assert mock_cls.call_args.args[0].address == 48
        assert "TCPIP::127.0.0.1::4001::SOCKET" in capsys.readouterr().out
