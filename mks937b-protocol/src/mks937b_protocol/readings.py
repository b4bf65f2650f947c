"""Pressure reading decoder.

A pressure response is either a number in scientific notation or a symbolic
token reporting why the sensor cannot produce a measurement. Tokens may be
embedded in extra characters, so they are matched as substrings, longest
first: ``OFF`` is itself a substring of ``CTRL_OFF`` and ``PROT_OFF``.
"""

from __future__ import annotations

import math

from mks937b_core.types import STATUS_OK, Reading

from mks937b_protocol.errors import InvalidReadingError

PRESSURE_FIELDS = 6

_STATUS_DESCRIPTIONS: dict[str, str] = {
    "LO<": "Pressure lower than minimum",
    "ATM": "PR when pressure is lower than 450 Torr",
    "OFF": "Cold cathode HV if OFF, or HC/PR/CP power if OFF",
    "WAIT": "CC or HC startup delay",
    "LowEmis": "HC OFF due to low emission",
    "CTRL_OFF": "CC or HC if OFF in controlled state",
    "PROT_OFF": "CC or HC if OFF in protected state",
    "MISCONN": "Sensor improperly connected, or broken filament (PR, CP only)",
    "NOGAUGE": "Controller unable to determine sensor connection",
    "NO_GAUGE": "Controller unable to determine sensor connection",
    "COMB_DISABLED": "Combination disabled",
}

# Longest token first; sorted() is stable so equal lengths keep table order.
STATUS_TOKENS: tuple[tuple[str, str], ...] = tuple(
    sorted(_STATUS_DESCRIPTIONS.items(), key=lambda item: len(item[0]), reverse=True)
)


def match_status(text: str) -> str | None:
    """Return the status description for the first token found in *text*.

    Args:
        text: A single pressure field.

    Returns:
        The description, or None if no known token occurs in *text*.
    """
    for token, description in STATUS_TOKENS:
        if token in text:
            return description
    return None


def decode_reading(text: str) -> Reading:
    """Decode one pressure field.

    Args:
        text: The field as returned by the controller.

    Returns:
        ``Reading(0.0, description)`` for a symbolic token, otherwise
        ``Reading(value, "OK")``.

    Raises:
        InvalidReadingError: If *text* is neither a known token nor a
            finite number.
    """
    description = match_status(text)
    if description is not None:
        return Reading(value=0.0, status=description)
    try:
        value = float(text)
    except ValueError:
        raise InvalidReadingError(text) from None
    if not math.isfinite(value):
        raise InvalidReadingError(text, "not a finite number")
    return Reading(value=value, status=STATUS_OK)


def decode_readings(text: str, count: int = PRESSURE_FIELDS) -> tuple[Reading, ...]:
    """Decode a space-separated list of pressure fields.

    Args:
        text: The full response body, e.g. ``"1.0E-03 2.0E-03 OFF ..."``.
        count: Number of fields the response must contain.

    Returns:
        One :class:`Reading` per field, in channel order.

    Raises:
        InvalidReadingError: If the field count differs from *count* or any
            field fails to decode. No partial result is returned.
    """
    fields = text.split()
    if len(fields) != count:
        raise InvalidReadingError(text, f"expected {count} fields, got {len(fields)}")
    return tuple(decode_reading(field) for field in fields)
