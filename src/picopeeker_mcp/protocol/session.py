"""One framed request/response exchange per call.

The serial link has no message boundaries, so every exchange follows the
same fixed shape:

1. open the port,
2. drain whatever the device left in the buffer (boot banner, a previous
   answer nobody read),
3. send one command line,
4. poll with short reads until the terminator shows up or the command's
   deadline passes,
5. close the port, whatever happened.

A deadline with no bytes at all is a :class:`ResponseTimeoutError`. A
deadline with some bytes but no terminator is *not* an error: the partial
transcript is returned with ``terminated=False`` and a warning is logged,
since a half-finished search listing can still be useful.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from ..errors import ResponseTimeoutError, WriteError
from ..transport.serial_connection import SerialConnection
from .commands import (
    BAUDRATE,
    DRAIN_BUFFER_SIZE,
    RECEIVE_BUFFER_SIZE,
    Command,
    ExchangeTiming,
    Landmarks,
    Read,
    SearchFlash,
    SearchRAM,
)
from .parser import NO_LANDMARKS, summarize_landmarks
from .patterns import PatternType, to_hex_pattern
from .validation import validate_address, validate_length, validate_port

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[str, int], SerialConnection]


@dataclass(frozen=True)
class Response:
    """The accumulated transcript of one exchange."""

    text: str
    terminated: bool

    @property
    def complete(self) -> bool:
        return self.terminated

    def __repr__(self) -> str:
        return f"Response(len={len(self.text)}, terminated={self.terminated})"


class SerialSession:
    """Runs exchanges against a PicoPeeker device.

    The session holds no port between calls; each operation opens its own
    connection through ``connection_factory`` and closes it before
    returning. Two sessions must not talk to the same physical port at the
    same time; see :class:`picopeeker_mcp.worker.ExchangeRunner`.
    """

    def __init__(
        self,
        baudrate: int = BAUDRATE,
        connection_factory: ConnectionFactory = SerialConnection,
        timing: ExchangeTiming | None = None,
    ) -> None:
        self._baudrate = baudrate
        self._connection_factory = connection_factory
        # Overrides the per-command timing table when set
        self._timing = timing

    def exchange(self, port: str, command: Command) -> Response:
        """Send ``command`` on ``port`` and collect the answer.

        Raises:
            TransportOpenError: If the port cannot be opened.
            WriteError: If the command line cannot be sent.
            ResponseTimeoutError: If nothing arrives before the deadline.
        """
        timing = self._timing or command.timing
        conn = self._connection_factory(port, self._baudrate)
        conn.open()
        try:
            self._drain(conn, timing)
            self._send(conn, command)
            return self._receive(conn, port, command, timing)
        finally:
            conn.close()

    def fetch_landmarks(self, port: str) -> str:
        """Return the device's landmarks as ``"name @ 0x... | ..."``."""
        port = validate_port(port)
        response = self.exchange(port, Landmarks())
        summary = summarize_landmarks(response.text)
        if not summary:
            return NO_LANDMARKS
        return summary

    def read_memory(self, port: str, address: str, length: str) -> str:
        """Return the raw hex-dump transcript for ``length`` bytes at ``address``.

        Args:
            port: Serial port name.
            address: ``0x``-prefixed hex address.
            length: Decimal byte count, 1-4096.
        """
        port = validate_port(port)
        command = Read(address=validate_address(address), length=validate_length(length))
        return self.exchange(port, command).text

    def search_memory(self, port: str, pattern_hex: str) -> str:
        """Return the raw SRAM search transcript."""
        port = validate_port(port)
        command = SearchRAM(to_hex_pattern(pattern_hex, PatternType.HEX))
        return self.exchange(port, command).text

    def search_flash(self, port: str, pattern_hex: str) -> str:
        """Return the raw flash search transcript."""
        port = validate_port(port)
        command = SearchFlash(to_hex_pattern(pattern_hex, PatternType.HEX))
        return self.exchange(port, command).text

    def _drain(self, conn: SerialConnection, timing: ExchangeTiming) -> None:
        time.sleep(timing.drain_delay)
        conn.set_read_timeout(timing.drain_timeout)
        try:
            stale = conn.read(DRAIN_BUFFER_SIZE)
        except OSError as e:
            logger.debug("Drain read failed: %s", e)
            return
        if stale:
            logger.debug("Discarded %d stale bytes", len(stale))

    def _send(self, conn: SerialConnection, command: Command) -> None:
        line = command.encode()
        try:
            conn.write(line)
        except WriteError:
            raise
        except OSError as e:
            raise WriteError(f"failed to write: {e}") from e
        logger.debug("Sent %r", line)

    def _receive(
        self,
        conn: SerialConnection,
        port: str,
        command: Command,
        timing: ExchangeTiming,
    ) -> Response:
        chunks: list[str] = []
        result = ""
        start = time.monotonic()

        while time.monotonic() - start < timing.deadline:
            conn.set_read_timeout(timing.poll_timeout)
            try:
                data = conn.read(RECEIVE_BUFFER_SIZE)
            except OSError as e:
                logger.debug("Read error on %s: %s", port, e)
                continue
            if not data:
                continue

            chunks.append(data.decode("ascii", errors="replace"))
            result = "".join(chunks)
            if command.terminator in result:
                logger.debug("Received %d chars from %s", len(result), port)
                return Response(text=result, terminated=True)

        if not result:
            raise ResponseTimeoutError(
                f"timeout: no response from device on {port} "
                f"after {timing.deadline:g}s"
            )

        logger.warning(
            "%s on %s: no %s within %gs, returning %d chars of partial output",
            command.kind.value,
            port,
            command.terminator,
            timing.deadline,
            len(result),
        )
        return Response(text=result, terminated=False)


_default_session = SerialSession()


def fetch_landmarks(port: str) -> str:
    """Module-level shortcut for :meth:`SerialSession.fetch_landmarks`."""
    return _default_session.fetch_landmarks(port)


def read_memory(port: str, address: str, length: str) -> str:
    """Module-level shortcut for :meth:`SerialSession.read_memory`."""
    return _default_session.read_memory(port, address, length)


def search_memory(port: str, pattern_hex: str) -> str:
    """Module-level shortcut for :meth:`SerialSession.search_memory`."""
    return _default_session.search_memory(port, pattern_hex)


def search_flash(port: str, pattern_hex: str) -> str:
    """Module-level shortcut for :meth:`SerialSession.search_flash`."""
    return _default_session.search_flash(port, pattern_hex)
