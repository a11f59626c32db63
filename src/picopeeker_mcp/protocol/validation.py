"""Operator-input validation for the read command.

These checks run before any serial port is opened, so a typo never costs
a round trip to the device.
"""

from __future__ import annotations

from ..errors import ValidationError
from .commands import MAX_ADDRESS, MAX_READ_LENGTH

_HEX_DIGITS = set("0123456789abcdefABCDEF")
_DECIMAL_DIGITS = set("0123456789")


def validate_port(port: str) -> str:
    """Return the stripped port name, or raise if it is empty."""
    port = (port or "").strip()
    if not port:
        raise ValidationError("Please enter a port name")
    return port


def validate_address(address: str) -> int:
    """Parse a ``0x``-prefixed 32-bit hex address.

    Args:
        address: Text such as ``"0x20000000"``.

    Returns:
        The address as an int.

    Raises:
        ValidationError: If the prefix is missing or the digits do not
            form a 32-bit unsigned hex value.
    """
    address = (address or "").strip()
    if not address:
        raise ValidationError("Please enter an address")
    if not address.startswith(("0x", "0X")):
        raise ValidationError("Address must start with 0x (e.g., 0x20000000)")

    digits = address[2:]
    if not digits or not set(digits) <= _HEX_DIGITS or int(digits, 16) > MAX_ADDRESS:
        raise ValidationError("Invalid hex address. Use format like 0x20000000")
    return int(digits, 16)


def validate_length(length: str) -> int:
    """Parse a decimal read length in the range 1-4096."""
    length = (length or "").strip()
    if not length:
        raise ValidationError("Please enter a length")
    # ASCII digits with an optional sign; no underscores or other scripts' digits
    digits = length[1:] if length[0] in "+-" else length
    if not digits or not set(digits) <= _DECIMAL_DIGITS:
        raise ValidationError(
            f"Length must be a number between 1 and {MAX_READ_LENGTH}"
        )
    value = int(length, 10)
    if not 0 < value <= MAX_READ_LENGTH:
        raise ValidationError(
            f"Length must be a number between 1 and {MAX_READ_LENGTH}"
        )
    return value
