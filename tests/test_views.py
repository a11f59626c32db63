"""Tests for the 16-bit, 32-bit and float views."""

import re

from picopeeker_mcp.formatting.hexdump import render_hex_dump
from picopeeker_mcp.formatting.views import (
    DisplayMode,
    format_as_16bit_words,
    format_as_32bit_words,
    format_as_floats,
    format_memory_dump,
)


def _rows(text):
    """Data rows of a view: lines that start with an 8-digit address."""
    return [line for line in text.splitlines() if re.match(r"[0-9a-f]{8}: ", line)]


def test_bytes_mode_is_identity():
    """Bytes (Hex) hands back the transcript as-is."""
    for text in ("", "anything at all", render_hex_dump(b"\x01\x02", 0x20)):
        assert format_memory_dump(text, "Bytes (Hex)") == text
        assert format_memory_dump(text, DisplayMode.BYTES) == text


def test_unparseable_input_returned_unchanged():
    """Text with no hex rows comes back unchanged in every mode."""
    text = "ERROR: Address out of valid range\n"
    for mode in DisplayMode:
        assert format_memory_dump(text, mode) == text


def test_unknown_mode_returns_input():
    """An unrecognised mode name leaves the dump alone."""
    dump = render_hex_dump(b"\x01\x02", 0)
    assert format_memory_dump(dump, "Octal") == dump


def test_16bit_little_endian():
    """Halfwords are read little-endian, unsigned and signed."""
    out = format_as_16bit_words(b"\x01\x02\xff\xff", 0x20000000)
    rows = _rows(out)
    assert rows[0] == "20000000: 01 02     0x0201     513"
    assert rows[1] == "20000002: ff ff     0xffff     -1"


def test_16bit_odd_tail_is_one_partial_row():
    """A trailing odd byte gets a single partial row."""
    rows = _rows(format_as_16bit_words(b"\x01\x02\x80", 0x100))
    assert len(rows) == 2
    assert rows[-1] == "00000102: 80        0x80       -128 (partial)"
    assert sum("(partial)" in r for r in rows) == 1


def test_32bit_signed_and_unsigned():
    """Words show hex, signed and unsigned columns."""
    rows = _rows(format_as_32bit_words(b"\xff\xff\xff\xff\x2a\x00\x00\x00", 0))
    assert rows[0].startswith("00000000: ff ff ff ff  0xffffffff  -1")
    assert rows[0].endswith("4294967295")
    assert rows[1] == f"00000004: 2a 00 00 00  0x0000002a  {42:<16d}  42"


def test_32bit_partial_word():
    """Leftover bytes after the last full word are flagged as partial."""
    rows = _rows(format_as_32bit_words(bytes(6), 0x10))
    assert len(rows) == 2
    assert rows[-1] == "00000014: 00 00 (partial word)"


def test_float_bit_pattern():
    """Floats are the raw IEEE-754 bits, not a numeric conversion."""
    rows = _rows(format_as_floats(b"\x00\x00\x80\x3f\x00\x00\x20\xc1", 0))
    assert rows[0] == "00000000: 00 00 80 3f  1.000000"
    assert rows[1] == "00000004: 00 00 20 c1  -10.000000"


def test_float_nan_and_infinities():
    """NaN and infinities are spelled NaN, +Inf and -Inf."""
    rows = _rows(format_as_floats(b"\x00\x00\xc0\x7f\x00\x00\x80\x7f\x00\x00\x80\xff", 0))
    assert rows[0] == "00000000: 00 00 c0 7f  NaN"
    assert rows[1] == "00000004: 00 00 80 7f  +Inf"
    assert rows[2] == "00000008: 00 00 80 ff  -Inf"


def test_float_partial():
    """Leftover bytes after the last full float are flagged as partial."""
    rows = _rows(format_as_floats(bytes(9), 0))
    assert sum("(partial float)" in r for r in rows) == 1
    assert rows[-1] == "00000008: 00 (partial float)"


def test_views_are_framed():
    """Every view has a banner, a column header and the end marker."""
    for fn in (format_as_16bit_words, format_as_32bit_words, format_as_floats):
        out = fn(b"\x00" * 4, 0)
        lines = out.splitlines()
        assert lines[0].startswith("===") and lines[0].endswith("===")
        assert lines[2].startswith("Address:")
        assert lines[-1] == "===END==="


def test_format_uses_dump_address():
    """Row addresses start at the dump's base address."""
    dump = render_hex_dump(b"\x01\x02\x03\x04", 0x20000010)
    out = format_memory_dump(dump, "32-bit Words")
    assert "20000010: 01 02 03 04  0x04030201" in out


def test_never_empty_for_well_formed_input():
    """A valid dump always produces some output."""
    dump = render_hex_dump(bytes(range(7)), 0x20000000)
    for mode in DisplayMode:
        assert format_memory_dump(dump, mode)
