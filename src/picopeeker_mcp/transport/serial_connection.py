"""Serial connection to a Pico running the PicoPeeker firmware.

The Pico enumerates as a USB CDC serial device (``/dev/tty.usbmodem*`` on
macOS, ``/dev/ttyACM*`` on Linux, ``COMx`` on Windows). The link carries
plain ASCII at 115200 baud, 8N1, with no flow control.
"""

from __future__ import annotations

import logging

import serial

from ..errors import TransportOpenError, WriteError

DEFAULT_BAUDRATE = 115200
DEFAULT_TIMEOUT = 0.1

logger = logging.getLogger(__name__)


class SerialConnection:
    """Owns one pyserial handle for the duration of one exchange.

    Usage::

        conn = SerialConnection("/dev/ttyACM0")
        conn.open()
        try:
            conn.write(b"LANDMARKS\\n")
            data = conn.read(1024)
        finally:
            conn.close()
    """

    def __init__(self, port: str, baudrate: int = DEFAULT_BAUDRATE) -> None:
        self._port = port
        self._baudrate = baudrate
        self._serial: serial.Serial | None = None

    @property
    def connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def open(self) -> None:
        """Open the port.

        Raises:
            TransportOpenError: If the port does not exist, is busy, or
                cannot be configured.
        """
        try:
            self._serial = serial.Serial(
                port=self._port,
                baudrate=self._baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=DEFAULT_TIMEOUT,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
            )
        except (serial.SerialException, OSError, ValueError) as e:
            self._serial = None
            raise TransportOpenError(
                f"failed to open port {self._port}: {e}"
            ) from e

        logger.info("Opened %s at %d baud", self._port, self._baudrate)

    def close(self) -> None:
        """Close the port. Errors are logged, never raised."""
        if self._serial is None:
            return

        try:
            self._serial.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error closing %s: %s", self._port, e)
        finally:
            self._serial = None
            logger.info("Closed %s", self._port)

    def set_read_timeout(self, seconds: float) -> None:
        """Change how long a single :meth:`read` may block."""
        self._require_open().timeout = seconds

    def write(self, data: bytes) -> int:
        """Write ``data`` and flush it to the device.

        Raises:
            WriteError: If the write fails or is short.
        """
        port = self._require_open()
        try:
            written = port.write(data)
            port.flush()
        except (serial.SerialException, OSError) as e:
            raise WriteError(f"failed to write to {self._port}: {e}") from e

        if written is not None and written != len(data):
            raise WriteError(
                f"failed to write to {self._port}: "
                f"wrote {written} of {len(data)} bytes"
            )
        return len(data)

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes, returning early on the read timeout.

        Returns:
            The bytes received, possibly empty.
        """
        return self._require_open().read(size)

    def _require_open(self) -> serial.Serial:
        if self._serial is None:
            raise ConnectionError(f"Port {self._port} is not open")
        return self._serial
