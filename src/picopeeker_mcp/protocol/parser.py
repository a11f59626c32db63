"""Response parsing for the LANDMARKS command.

The firmware answers ``LANDMARKS`` with a block like::

    LANDMARKS:
    global_var=0x20000a1c
    main=0x100003b5
    END_LANDMARKS
"""

from __future__ import annotations

import re
from dataclasses import dataclass

LANDMARKS_MARKER = "LANDMARKS:"
UNPARSEABLE_LANDMARKS = "Found LANDMARKS but couldn't parse"
NO_LANDMARKS = "No landmarks found in response"

_LANDMARK_RE = re.compile(r"(\w+)=(0x[0-9a-fA-F]+)")


@dataclass(frozen=True)
class Landmark:
    """A named fixed address reported by the device."""

    name: str
    address: str  # hex text exactly as received, e.g. "0x20000a1c"

    def __str__(self) -> str:
        return f"{self.name} @ {self.address}"


def parse_landmarks(text: str) -> list[Landmark] | None:
    """Extract landmarks from a LANDMARKS transcript.

    Returns:
        ``None`` if the transcript has no ``LANDMARKS:`` marker, otherwise
        every ``NAME=0xHEX`` token in order of appearance (possibly empty).
    """
    if LANDMARKS_MARKER not in text:
        return None
    return [Landmark(name, addr) for name, addr in _LANDMARK_RE.findall(text)]


def summarize_landmarks(text: str) -> str:
    """Render landmarks as ``"name @ 0x..."`` entries joined by ``" | "``.

    An absent marker yields ``""``; a marker with nothing parseable yields
    :data:`UNPARSEABLE_LANDMARKS` so the two cases stay distinguishable.
    """
    landmarks = parse_landmarks(text)
    if landmarks is None:
        return ""
    if not landmarks:
        return UNPARSEABLE_LANDMARKS
    return " | ".join(str(lm) for lm in landmarks)


_FOUND_RE = re.compile(r"FOUND:\s*0x([0-9a-fA-F]+)")
_TOTAL_RE = re.compile(r"Total matches:\s*(\d+)")
SEARCH_LIMIT_NOTICE = "(stopping after 100 matches)"


@dataclass(frozen=True)
class SearchResult:
    """Match addresses listed in a SEARCH or SEARCHFLASH transcript."""

    addresses: list[int]
    total: int | None  # as reported by the device, None if the line is missing
    limit_reached: bool = False


def parse_search_matches(text: str) -> SearchResult:
    """Collect the ``FOUND: 0x...`` addresses and the reported total.

    The firmware gives up after 100 matches and says so, which shows up
    here as ``limit_reached``.
    """
    addresses = [int(m, 16) for m in _FOUND_RE.findall(text)]
    total = _TOTAL_RE.search(text)
    return SearchResult(
        addresses=addresses,
        total=int(total.group(1)) if total else None,
        limit_reached=SEARCH_LIMIT_NOTICE in text,
    )
