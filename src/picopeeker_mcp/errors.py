"""Exception types raised by the protocol session and validators.

Each error records the ``stage`` of the exchange that failed so callers can
tell a cabling problem (open) from a silent device (timeout).
"""

from __future__ import annotations


class PicoPeekerError(Exception):
    """Base class for all errors raised by this package."""

    stage = "unknown"


class TransportOpenError(PicoPeekerError, ConnectionError):
    """The serial port could not be opened (missing, busy, no permission)."""

    stage = "open"


class WriteError(PicoPeekerError, IOError):
    """The command line could not be written after the port was opened."""

    stage = "write"


class ResponseTimeoutError(PicoPeekerError, TimeoutError):
    """No bytes at all arrived before the command's deadline."""

    stage = "timeout"


class ValidationError(PicoPeekerError, ValueError):
    """Operator input was rejected before any transport was opened."""

    stage = "validation"
