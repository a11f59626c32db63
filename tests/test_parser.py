"""Tests for landmark and search-result parsing."""

from picopeeker_mcp.protocol.parser import (
    UNPARSEABLE_LANDMARKS,
    Landmark,
    parse_landmarks,
    parse_search_matches,
    summarize_landmarks,
)

DEVICE_LANDMARKS = (
    "LANDMARKS:\n"
    "global_var=0x20000a1c\n"
    "global_uninitialized=0x20000b40\n"
    "main=0x100003b5\n"
    "END_LANDMARKS\n\n"
)


def test_summary_joins_in_order():
    """The summary lists landmarks in order, separated by pipes."""
    text = "LANDMARKS:\nFOO=0x1000 BAR=0x2000\nEND_LANDMARKS"
    assert summarize_landmarks(text) == "FOO @ 0x1000 | BAR @ 0x2000"


def test_device_output():
    """Real firmware output yields every landmark with its hex text."""
    landmarks = parse_landmarks(DEVICE_LANDMARKS)
    assert [lm.name for lm in landmarks] == ["global_var", "global_uninitialized", "main"]
    assert landmarks[0].address == "0x20000a1c"
    assert landmarks[2] == Landmark("main", "0x100003b5")


def test_marker_without_tokens():
    """A marker with nothing parseable is reported, not silently empty."""
    text = "LANDMARKS:\ngarbage\nEND_LANDMARKS"
    assert parse_landmarks(text) == []
    assert summarize_landmarks(text) == UNPARSEABLE_LANDMARKS


def test_missing_marker():
    """Without the LANDMARKS: marker there is nothing to parse."""
    assert parse_landmarks("FOO=0x1000") is None
    assert summarize_landmarks("FOO=0x1000") == ""


def test_search_matches():
    """FOUND lines and the total are read from a search answer."""
    text = (
        "=== SEARCHING SRAM ===\n"
        "Range: 0x20000000 - 0x20081fff (532480 bytes)\n"
        "Pattern: de ad be ef (4 bytes)\n\n"
        "FOUND: 0x20000a20\n"
        "FOUND: 0x20081f10 (Maybe Self-Referential - command buffer)\n"
        "\nTotal matches: 2\n"
        "===END===\n"
    )
    result = parse_search_matches(text)
    assert result.addresses == [0x20000A20, 0x20081F10]
    assert result.total == 2
    assert not result.limit_reached


def test_search_limit_notice():
    """The firmware's match cap is reported."""
    text = "FOUND: 0x20000000\n(stopping after 100 matches)\n\nTotal matches: 100\n===END===\n"
    assert parse_search_matches(text).limit_reached


def test_search_without_total():
    """A truncated answer has no total."""
    assert parse_search_matches("FOUND: 0x10").total is None
