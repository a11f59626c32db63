"""Command variants and the wire grammar of the PicoPeeker firmware.

Every command is a single newline-terminated ASCII line. The device answers
with free-form text that ends in a command-specific terminator token::

    LANDMARKS\\n                  ... END_LANDMARKS
    READ:0x20000000:256\\n        ... ===END===
    SEARCH:DEADBEEF\\n            ... ===END===
    SEARCHFLASH:DEADBEEF\\n       ... ===END===
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BAUDRATE = 115200

LANDMARKS_TERMINATOR = "END_LANDMARKS"
DUMP_TERMINATOR = "===END==="

MAX_READ_LENGTH = 4096
MAX_ADDRESS = 0xFFFFFFFF

# Read-buffer sizes used during the drain and receive stages
DRAIN_BUFFER_SIZE = 4096
RECEIVE_BUFFER_SIZE = 1024
POLL_TIMEOUT = 0.1


class CommandKind(Enum):
    """The four request kinds the firmware understands."""

    LANDMARKS = "LANDMARKS"
    READ = "READ"
    SEARCH = "SEARCH"
    SEARCH_FLASH = "SEARCHFLASH"


@dataclass(frozen=True)
class ExchangeTiming:
    """Per-command timing contract, all values in seconds.

    ``drain_delay`` is how long to let stale bytes pile up before the
    discarding read, ``drain_timeout`` bounds that read, and ``deadline``
    bounds the whole receive loop.
    """

    drain_delay: float
    drain_timeout: float
    deadline: float
    poll_timeout: float = POLL_TIMEOUT


TIMINGS: dict[CommandKind, ExchangeTiming] = {
    CommandKind.LANDMARKS: ExchangeTiming(drain_delay=0.2, drain_timeout=0.1, deadline=2.0),
    CommandKind.READ: ExchangeTiming(drain_delay=0.1, drain_timeout=0.05, deadline=5.0),
    # Scanning SRAM takes seconds, 4 MB of flash takes a minute or more
    CommandKind.SEARCH: ExchangeTiming(drain_delay=0.1, drain_timeout=0.05, deadline=30.0),
    CommandKind.SEARCH_FLASH: ExchangeTiming(drain_delay=0.1, drain_timeout=0.05, deadline=120.0),
}

TERMINATORS: dict[CommandKind, str] = {
    CommandKind.LANDMARKS: LANDMARKS_TERMINATOR,
    CommandKind.READ: DUMP_TERMINATOR,
    CommandKind.SEARCH: DUMP_TERMINATOR,
    CommandKind.SEARCH_FLASH: DUMP_TERMINATOR,
}


class _BaseCommand:
    kind: CommandKind

    @property
    def terminator(self) -> str:
        return TERMINATORS[self.kind]

    @property
    def timing(self) -> ExchangeTiming:
        return TIMINGS[self.kind]

    def to_line(self) -> str:
        raise NotImplementedError

    def encode(self) -> bytes:
        """Return the command line as ASCII bytes, ready to write."""
        return self.to_line().encode("ascii")


@dataclass(frozen=True)
class Landmarks(_BaseCommand):
    """Ask the device for its named fixed addresses."""

    kind = CommandKind.LANDMARKS

    def to_line(self) -> str:
        return "LANDMARKS\n"


@dataclass(frozen=True)
class Read(_BaseCommand):
    """Dump ``length`` bytes starting at ``address``."""

    address: int
    length: int

    kind = CommandKind.READ

    def __post_init__(self) -> None:
        if not 0 <= self.address <= MAX_ADDRESS:
            raise ValueError(f"Address must fit in 32 bits, got {self.address:#x}")
        if not 1 <= self.length <= MAX_READ_LENGTH:
            raise ValueError(
                f"Length must be 1-{MAX_READ_LENGTH}, got {self.length}"
            )

    def to_line(self) -> str:
        return f"READ:0x{self.address:08x}:{self.length}\n"


@dataclass(frozen=True)
class SearchRAM(_BaseCommand):
    """Scan SRAM for a hex byte pattern."""

    pattern_hex: str

    kind = CommandKind.SEARCH

    def __post_init__(self) -> None:
        if not self.pattern_hex:
            raise ValueError("Search pattern cannot be empty")

    def to_line(self) -> str:
        return f"SEARCH:{self.pattern_hex}\n"


@dataclass(frozen=True)
class SearchFlash(_BaseCommand):
    """Scan flash for a hex byte pattern."""

    pattern_hex: str

    kind = CommandKind.SEARCH_FLASH

    def __post_init__(self) -> None:
        if not self.pattern_hex:
            raise ValueError("Search pattern cannot be empty")

    def to_line(self) -> str:
        return f"SEARCHFLASH:{self.pattern_hex}\n"


Command = Landmarks | Read | SearchRAM | SearchFlash
