"""Parameter formatting and parsing utilities.

The controller expects each parameter in one exact textual encoding. The
formatting must be reproduced byte for byte, since a set command is only
confirmed when the controller echoes the same string back.

Encodings:
    - Set points and thresholds: ``%.2E`` (``"5.00E-03"``)
    - Correction factors and sensitivities: ``%.1f`` (``"1.0"``)
    - Addresses: three-digit zero padded decimal (``"048"``)
    - Switches: ``ON`` / ``OFF``
"""

from __future__ import annotations


def format_exponent(value: float) -> str:
    """Format a float in the controller's scientific notation.

    Args:
        value: The numeric value to format.

    Returns:
        The value rendered with ``%.2E`` (two decimals, upper-case exponent).
    """
    return f"{value:.2E}"


def format_fixed(value: float) -> str:
    """Format a float with one decimal place.

    Args:
        value: The numeric value to format.

    Returns:
        The value rendered with ``%.1f``.
    """
    return f"{value:.1f}"


def format_address(address: int) -> str:
    """Format a controller address as a three-digit decimal string."""
    return f"{address:03d}"


def format_bool(value: bool) -> str:
    """Format a boolean as ``"ON"`` or ``"OFF"``."""
    return "ON" if value else "OFF"


def parse_number(text: str) -> float:
    """Parse a numeric response into a float.

    Args:
        text: The raw response string (leading/trailing whitespace is stripped).

    Returns:
        The parsed float value.

    Raises:
        ValueError: If *text* cannot be parsed as a number.
    """
    token = text.strip()
    try:
        return float(token)
    except ValueError:
        raise ValueError(f"Invalid number: {text!r}") from None


def parse_int(text: str) -> int:
    """Parse an integer response.

    Args:
        text: The raw response string.

    Returns:
        The parsed integer.

    Raises:
        ValueError: If *text* is not a valid integer.
    """
    token = text.strip()
    try:
        return int(token)
    except ValueError:
        raise ValueError(f"Invalid integer: {text!r}") from None


def parse_bool(text: str) -> bool:
    """Parse an ``ON``/``OFF`` response.

    Args:
        text: The raw response string.

    Returns:
        True for ``"ON"`` and False for ``"OFF"`` (case-insensitive).

    Raises:
        ValueError: If *text* is neither ``ON`` nor ``OFF``.
    """
    token = text.strip().upper()
    if token == "ON":
        return True
    if token == "OFF":
        return False
    raise ValueError(f"Invalid switch state: {text!r}")
