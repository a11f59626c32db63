"""Parsing and rendering of the firmware's textual hex dump.

A ``READ`` answer looks like::

    === HEX DUMP ===
    Address: 0x20000000, Length: 32 bytes

    Address:  00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F  ASCII
    --------  -----------------------------------------------  ----------------
    20000000: 2a 00 00 00 de ad be ef 00 00 00 00 00 00 00 00  *...............
    20000010: 68 65 6c 6c 6f 00 00 00 00 00 00 00 00 00 00 00  hello...........

    ===END===
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..protocol.commands import DUMP_TERMINATOR

BYTES_PER_ROW = 16

_HEX_BYTE_RE = re.compile(r"[0-9a-fA-F]{2}")
_HEX_VALUE_RE = re.compile(r"0[xX]([0-9a-fA-F]+)")

# Lines with these prefixes carry metadata or firmware notices, not data.
_NON_DATA_KEYS = frozenset({"Address", "WARNING", "ERROR"})


@dataclass(frozen=True)
class HexDump:
    """Bytes recovered from a dump, with the address of the first one."""

    data: bytes
    base_address: int = 0

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"HexDump(base_address=0x{self.base_address:08x}, len={len(self.data)})"


def extract_start_address(text: str) -> int:
    """Find the dump's base address from its ``Address: 0x...`` token.

    Returns 0 when no ``Address:`` token is followed by a hex value.
    """
    for line in text.splitlines():
        if "Address:" not in line:
            continue
        fields = line.split()
        for i, field in enumerate(fields[:-1]):
            if field != "Address:":
                continue
            match = _HEX_VALUE_RE.match(fields[i + 1].removesuffix(","))
            if match:
                return int(match.group(1), 16) & 0xFFFFFFFF
    return 0


def parse_hex_bytes(text: str) -> bytes:
    """Collect every byte from the hex columns of ``text``.

    For each line with a colon, the part after the first colon is read up
    to the first double space (where the ASCII column starts). Tokens that
    are not exactly two hex digits are skipped. ``Address:`` headers and
    the firmware's ``WARNING:``/``ERROR:`` notices are not read.
    """
    out = bytearray()
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, hex_part = line.split(":", 1)
        if key.strip() in _NON_DATA_KEYS:
            continue
        cut = hex_part.find("  ")
        if cut != -1:
            hex_part = hex_part[:cut]
        for token in hex_part.split():
            if _HEX_BYTE_RE.fullmatch(token):
                out.append(int(token, 16))
    return bytes(out)


def parse_hex_dump(text: str) -> HexDump:
    """Parse a dump transcript into its bytes and base address."""
    return HexDump(data=parse_hex_bytes(text), base_address=extract_start_address(text))


def render_hex_dump(data: bytes, address: int = 0) -> str:
    """Render ``data`` the way the firmware answers a ``READ`` command."""
    lines = [
        "=== HEX DUMP ===",
        f"Address: 0x{address:08x}, Length: {len(data)} bytes",
        "",
        "Address:  " + " ".join(f"{i:02X}" for i in range(BYTES_PER_ROW)) + "  ASCII",
        "--------  " + "-" * (BYTES_PER_ROW * 3 - 1) + "  " + "-" * BYTES_PER_ROW,
    ]
    for offset in range(0, len(data), BYTES_PER_ROW):
        row = data[offset : offset + BYTES_PER_ROW]
        hex_cols = "".join(f"{b:02x} " for b in row).ljust(BYTES_PER_ROW * 3)
        ascii_col = "".join(chr(b) if 32 <= b <= 126 else "." for b in row)
        lines.append(f"{(address + offset) & 0xFFFFFFFF:08x}: {hex_cols} {ascii_col}")
    lines.append("")
    lines.append(DUMP_TERMINATOR)
    return "\n".join(lines) + "\n"
