"""Protocol layer: command grammar, validation, landmark parsing, and the serial session."""

from .commands import Command, CommandKind, Landmarks, Read, SearchFlash, SearchRAM
