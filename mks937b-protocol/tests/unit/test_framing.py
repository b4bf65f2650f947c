"""Tests for the frame codec."""

from __future__ import annotations

import pytest

from mks937b_protocol.errors import (
    InvalidAddressError,
    NegativeAcknowledgeError,
    UnexpectedAddressError,
    UnexpectedParameterError,
    UnexpectedReplyError,
)
from mks937b_protocol.framing import (
    Response,
    Tag,
    decode_response,
    encode_query,
    encode_set,
    verify_query,
    verify_set,
)

# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


class TestEncodeQuery:
    """Tests for encode_query."""

    def test_pressure_query(self) -> None:
        assert encode_query(1, "PR1") == b"@001PR1?;FF"

    def test_three_digit_address(self) -> None:
        assert encode_query(254, "PRZ") == b"@254PRZ?;FF"

    def test_single_letter_mnemonic(self) -> None:
        assert encode_query(48, "U") == b"@048U?;FF"

    @pytest.mark.parametrize("address", range(1, 255))
    def test_address_zero_padded(self, address: int) -> None:
        assert encode_query(address, "PRZ") == f"@{address:03d}PRZ?;FF".encode("ascii")

    @pytest.mark.parametrize("address", [0, 255, -1])
    def test_invalid_address(self, address: int) -> None:
        with pytest.raises(InvalidAddressError):
            encode_query(address, "PR1")

    @pytest.mark.parametrize("mnemonic", ["", "pr1", "PR 1", "TOOLONG", "PR1?"])
    def test_invalid_mnemonic(self, mnemonic: str) -> None:
        with pytest.raises(ValueError, match="mnemonic"):
            encode_query(1, mnemonic)


class TestEncodeSet:
    """Tests for encode_set."""

    def test_set_point(self) -> None:
        assert encode_set(3, "CSP1", "5.00E-03") == b"@003CSP1!5.00E-03;FF"

    def test_baud_rate(self) -> None:
        assert encode_set(1, "BR", "19200") == b"@001BR!19200;FF"

    @pytest.mark.parametrize("address", range(1, 255))
    def test_address_zero_padded(self, address: int) -> None:
        assert encode_set(address, "DLY", "8") == f"@{address:03d}DLY!8;FF".encode("ascii")

    def test_invalid_address(self) -> None:
        with pytest.raises(InvalidAddressError):
            encode_set(300, "BR", "9600")

    def test_empty_parameter(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            encode_set(1, "BR", "")

    @pytest.mark.parametrize("parameter", ["1;FF", "@1", "µ"])
    def test_parameter_with_delimiters(self, parameter: str) -> None:
        with pytest.raises(ValueError, match="Invalid set parameter"):
            encode_set(1, "U", parameter)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


class TestDecodeResponse:
    """Tests for decode_response."""

    def test_ack(self) -> None:
        response = decode_response(b"@001ACK5.20E-07;FF")
        assert response.address == "001"
        assert response.tag is Tag.ACK
        assert response.parameter == "5.20E-07"
        assert response.acknowledged

    def test_nak(self) -> None:
        response = decode_response(b"@001NAK160;FF")
        assert response.tag is Tag.NAK
        assert response.parameter == "160"
        assert not response.acknowledged

    def test_accepts_str(self) -> None:
        assert decode_response("@010ACKTorr;FF").parameter == "Torr"

    def test_surrounding_whitespace_ignored(self) -> None:
        assert decode_response(b"\r\n@001ACKON;FF\r\n").parameter == "ON"

    def test_parameter_with_spaces(self) -> None:
        response = decode_response(b"@001ACK1.0E-03 2.0E-03 OFF;FF")
        assert response.parameter == "1.0E-03 2.0E-03 OFF"

    def test_empty_parameter(self) -> None:
        assert decode_response(b"@001ACK;FF").parameter == ""

    def test_sent_recorded(self) -> None:
        response = decode_response(b"@001ACK8;FF", sent=b"@001DLY?;FF")
        assert response.sent == "@001DLY?;FF"

    @pytest.mark.parametrize(
        "raw",
        [b"garbage", b"@001ACK5.20E-07", b"001ACK1;FF", b"@001XYZ1;FF", b"@ACK1;FF", b""],
    )
    def test_malformed(self, raw: bytes) -> None:
        with pytest.raises(UnexpectedReplyError) as exc_info:
            decode_response(raw, sent=b"@001PR1?;FF")
        assert exc_info.value.sent == "@001PR1?;FF"


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


def _response(address: str, tag: Tag, parameter: str) -> Response:
    return Response(address=address, tag=tag, parameter=parameter, sent="@001BR!9600;FF")


class TestVerifyQuery:
    """Tests for verify_query."""

    def test_returns_value(self) -> None:
        assert verify_query(_response("001", Tag.ACK, "Torr"), 1) == "Torr"

    def test_address_mismatch(self) -> None:
        with pytest.raises(UnexpectedAddressError) as exc_info:
            verify_query(_response("099", Tag.ACK, "250"), 1)
        assert exc_info.value.expected == "001"
        assert exc_info.value.got == "099"

    def test_unpadded_address_rejected(self) -> None:
        with pytest.raises(UnexpectedAddressError):
            verify_query(_response("1", Tag.ACK, "250"), 1)

    def test_nak(self) -> None:
        with pytest.raises(NegativeAcknowledgeError) as exc_info:
            verify_query(_response("001", Tag.NAK, "160"), 1)
        assert exc_info.value.code == "160"

    def test_address_checked_before_nak(self) -> None:
        with pytest.raises(UnexpectedAddressError):
            verify_query(_response("002", Tag.NAK, "160"), 1)


class TestVerifySet:
    """Tests for verify_set."""

    def test_exact_echo(self) -> None:
        verify_set(_response("001", Tag.ACK, "9600"), 1, "9600")

    def test_echo_mismatch(self) -> None:
        with pytest.raises(UnexpectedParameterError) as exc_info:
            verify_set(_response("001", Tag.ACK, "19200"), 1, "9600")
        assert exc_info.value.expected == "9600"
        assert exc_info.value.got == "19200"

    def test_echo_compared_as_string(self) -> None:
        with pytest.raises(UnexpectedParameterError):
            verify_set(_response("001", Tag.ACK, "5.0E-03"), 1, "5.00E-03")

    def test_nak(self) -> None:
        with pytest.raises(NegativeAcknowledgeError):
            verify_set(_response("001", Tag.NAK, "169"), 1, "9600")

    def test_address_mismatch(self) -> None:
        with pytest.raises(UnexpectedAddressError):
            verify_set(_response("099", Tag.ACK, "9600"), 1, "9600")
