"""Tests for command variants and the wire grammar."""

import pytest

from picopeeker_mcp.protocol.commands import (
    CommandKind,
    DUMP_TERMINATOR,
    LANDMARKS_TERMINATOR,
    Landmarks,
    Read,
    SearchFlash,
    SearchRAM,
)


def test_landmarks_line():
    """LANDMARKS is sent as a bare newline-terminated word."""
    assert Landmarks().to_line() == "LANDMARKS\n"
    assert Landmarks().encode() == b"LANDMARKS\n"


def test_read_line_has_hex_address_and_decimal_length():
    """READ carries a zero-padded hex address and a decimal length."""
    assert Read(address=0x20000000, length=256).to_line() == "READ:0x20000000:256\n"


def test_search_lines():
    """RAM and flash searches use their own command words."""
    assert SearchRAM("DEADBEEF").to_line() == "SEARCH:DEADBEEF\n"
    assert SearchFlash("2A000000").to_line() == "SEARCHFLASH:2A000000\n"


def test_terminators():
    """LANDMARKS ends with END_LANDMARKS, everything else with ===END===."""
    assert Landmarks().terminator == LANDMARKS_TERMINATOR == "END_LANDMARKS"
    assert Read(0, 1).terminator == DUMP_TERMINATOR == "===END==="
    assert SearchRAM("00").terminator == DUMP_TERMINATOR
    assert SearchFlash("00").terminator == DUMP_TERMINATOR


def test_deadlines_grow_with_region_size():
    """Each command gets a deadline sized to the work it does."""
    assert Landmarks().timing.deadline == 2.0
    assert Read(0, 1).timing.deadline == 5.0
    assert SearchRAM("00").timing.deadline == 30.0
    assert SearchFlash("00").timing.deadline == 120.0


def test_drain_timings():
    """Drain pause and timeout follow the per-command table."""
    assert Landmarks().timing.drain_delay == pytest.approx(0.2)
    assert Landmarks().timing.drain_timeout == pytest.approx(0.1)
    assert Read(0, 1).timing.drain_delay == pytest.approx(0.1)
    assert Read(0, 1).timing.drain_timeout == pytest.approx(0.05)
    assert Read(0, 1).timing.poll_timeout == pytest.approx(0.1)


def test_kinds():
    """Each variant reports its command kind."""
    assert Landmarks().kind is CommandKind.LANDMARKS
    assert SearchFlash("00").kind is CommandKind.SEARCH_FLASH


def test_read_bounds():
    """Lengths outside 1-4096 and addresses beyond 32 bits are rejected."""
    Read(0xFFFFFFFF, 4096)
    with pytest.raises(ValueError):
        Read(0, 0)
    with pytest.raises(ValueError):
        Read(0, 4097)
    with pytest.raises(ValueError):
        Read(0x100000000, 1)


def test_commands_are_immutable():
    """Commands cannot be changed after construction."""
    cmd = Read(0x20000000, 16)
    with pytest.raises(AttributeError):
        cmd.length = 32


def test_empty_search_pattern_rejected():
    """A search needs at least one byte of pattern."""
    with pytest.raises(ValueError):
        SearchRAM("")
