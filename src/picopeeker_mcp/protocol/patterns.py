"""Conversion of operator search input into the hex pattern the firmware expects.

The firmware only understands ``SEARCH:<HEX>``; ASCII strings and integers
are turned into their in-memory byte representation first.
"""

from __future__ import annotations

import struct
from enum import Enum

from ..errors import ValidationError

MAX_PATTERN_BYTES = 64

_HEX_DIGITS = set("0123456789ABCDEF")


class PatternType(Enum):
    """How the operator's search text should be interpreted."""

    HEX = "Hex Bytes"
    ASCII = "ASCII String"
    INT32_LE = "32-bit Int (LE)"

    @classmethod
    def from_name(cls, name: str) -> PatternType:
        """Accept either the display label or a short alias (hex, ascii, int32)."""
        aliases = {
            "hex": cls.HEX,
            "ascii": cls.ASCII,
            "string": cls.ASCII,
            "int32": cls.INT32_LE,
            "int": cls.INT32_LE,
        }
        key = (name or "").strip()
        if key.lower() in aliases:
            return aliases[key.lower()]
        for member in cls:
            if member.value == key:
                return member
        raise ValidationError(
            f"Unknown pattern type '{name}'. Valid: {[m.value for m in cls]}"
        )


def string_to_hex(text: str) -> str:
    """Render each UTF-8 byte of ``text`` as two uppercase hex digits."""
    return text.encode("utf-8").hex().upper()


def int32_to_hex_le(value: int) -> str:
    """Render a signed 32-bit integer as its little-endian byte pattern."""
    return struct.pack("<i", value).hex().upper()


def to_hex_pattern(text: str, pattern_type: PatternType = PatternType.HEX) -> str:
    """Convert operator input to an uppercase hex pattern.

    Args:
        text: The raw search text.
        pattern_type: How to interpret ``text``.

    Returns:
        An even-length string of ``0-9A-F`` digits.

    Raises:
        ValidationError: If the input is empty or malformed, or the
            resulting pattern is longer than the firmware accepts.
    """
    if not text:
        raise ValidationError("Please enter a search pattern")

    if pattern_type is PatternType.HEX:
        pattern = text.upper().replace(" ", "")
        if len(pattern) % 2 != 0:
            raise ValidationError(
                "Hex pattern must have even number of characters (e.g., DEADBEEF)"
            )
        if not pattern:
            raise ValidationError("Hex pattern cannot be empty")
        if not set(pattern) <= _HEX_DIGITS:
            raise ValidationError(
                "Invalid hex pattern. Use only 0-9 and A-F (e.g., DEADBEEF)"
            )
    elif pattern_type is PatternType.ASCII:
        pattern = string_to_hex(text)
    else:
        try:
            value = int(text.strip(), 10)
        except ValueError as e:
            raise ValidationError(f"Invalid integer: {text!r}") from e
        if not -(2**31) <= value < 2**31:
            raise ValidationError(f"Invalid integer: {value} does not fit in 32 bits")
        pattern = int32_to_hex_le(value)

    if len(pattern) // 2 > MAX_PATTERN_BYTES:
        raise ValidationError(
            f"Pattern length must be 1-{MAX_PATTERN_BYTES} bytes "
            f"({len(pattern) // 2} given)"
        )
    return pattern
