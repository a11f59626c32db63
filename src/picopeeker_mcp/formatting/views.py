"""Alternate numeric views of a memory dump.

All multi-byte values are little-endian, matching the RP2040/RP2350 cores.
Every view ends with the same ``===END===`` line the device uses, so a
formatted view can be handled exactly like a transcript.
"""

from __future__ import annotations

import math
import struct
from enum import Enum

from ..protocol.commands import DUMP_TERMINATOR
from .hexdump import parse_hex_dump


class DisplayMode(Enum):
    """How a READ result is shown to the operator."""

    BYTES = "Bytes (Hex)"
    WORD16 = "16-bit Words"
    WORD32 = "32-bit Words"
    FLOAT32 = "Float (32-bit)"


def _addr(base: int, offset: int) -> str:
    return f"{(base + offset) & 0xFFFFFFFF:08x}"


def _float_text(value: float) -> str:
    """Six-decimal rendering, with NaN and infinities spelled NaN, +Inf and -Inf."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:f}"


def _remainder_row(data: bytes, base: int, unit: int, label: str) -> str | None:
    remainder = len(data) % unit
    if not remainder:
        return None
    start = len(data) - remainder
    tail = "".join(f"{b:02x} " for b in data[start:])
    return f"{_addr(base, start)}: {tail}({label})"


def _finish(lines: list[str]) -> str:
    lines.append("")
    lines.append(DUMP_TERMINATOR)
    return "\n".join(lines) + "\n"


def format_as_16bit_words(data: bytes, start_address: int = 0) -> str:
    """Show ``data`` as little-endian 16-bit words with signed decimals.

    A trailing odd byte becomes a ``(partial)`` row with its signed 8-bit
    value.
    """
    lines = [
        "=== 16-bit Word View (Little-Endian) ===",
        "",
        "Address:  Hex Bytes  Value      Decimal",
        "--------  ---------  ------     --------",
    ]
    for i in range(0, len(data) - 1, 2):
        unsigned, = struct.unpack_from("<H", data, i)
        signed, = struct.unpack_from("<h", data, i)
        lines.append(
            f"{_addr(start_address, i)}: {data[i]:02x} {data[i + 1]:02x}     "
            f"0x{unsigned:04x}     {signed}"
        )

    if len(data) % 2:
        i = len(data) - 1
        signed, = struct.unpack_from("<b", data, i)
        lines.append(
            f"{_addr(start_address, i)}: {data[i]:02x}        "
            f"0x{data[i]:02x}       {signed} (partial)"
        )
    return _finish(lines)


def format_as_32bit_words(data: bytes, start_address: int = 0) -> str:
    """Show ``data`` as little-endian 32-bit words, signed and unsigned."""
    lines = [
        "=== 32-bit Word View (Little-Endian) ===",
        "",
        "Address:  Hex Bytes        Value       Decimal (signed)  Decimal (unsigned)",
        "--------  ---------------  ----------  ----------------  ------------------",
    ]
    for i in range(0, len(data) - 3, 4):
        unsigned, = struct.unpack_from("<I", data, i)
        signed, = struct.unpack_from("<i", data, i)
        lines.append(
            f"{_addr(start_address, i)}: {data[i:i + 4].hex(' ')}  "
            f"0x{unsigned:08x}  {signed:<16d}  {unsigned}"
        )

    tail = _remainder_row(data, start_address, 4, "partial word")
    if tail:
        lines.append(tail)
    return _finish(lines)


def format_as_floats(data: bytes, start_address: int = 0) -> str:
    """Show ``data`` as IEEE-754 single-precision floats.

    The four bytes are reinterpreted bit for bit (``struct`` ``<f``), so
    ``00 00 80 3f`` reads as ``1.000000``.
    """
    lines = [
        "=== Float View (32-bit, Little-Endian) ===",
        "",
        "Address:  Hex Bytes        Float Value",
        "--------  ---------------  -----------",
    ]
    for i in range(0, len(data) - 3, 4):
        value, = struct.unpack_from("<f", data, i)
        hex_bytes = data[i:i + 4].hex(" ")
        lines.append(f"{_addr(start_address, i)}: {hex_bytes}  {_float_text(value)}")

    tail = _remainder_row(data, start_address, 4, "partial float")
    if tail:
        lines.append(tail)
    return _finish(lines)


_FORMATTERS = {
    DisplayMode.WORD16: format_as_16bit_words,
    DisplayMode.WORD32: format_as_32bit_words,
    DisplayMode.FLOAT32: format_as_floats,
}


def format_memory_dump(raw_dump: str, display_mode: DisplayMode | str) -> str:
    """Reformat a READ transcript for ``display_mode``.

    ``Bytes (Hex)`` returns ``raw_dump`` untouched. Any other mode parses
    the dump and renders the matching view; if nothing parses, or the mode
    is unknown, ``raw_dump`` is returned as is.
    """
    if isinstance(display_mode, str):
        try:
            display_mode = DisplayMode(display_mode)
        except ValueError:
            return raw_dump

    if display_mode is DisplayMode.BYTES:
        return raw_dump

    dump = parse_hex_dump(raw_dump)
    if not dump.data:
        return raw_dump

    return _FORMATTERS[display_mode](dump.data, dump.base_address)
