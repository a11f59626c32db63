"""Runtime settings, read from ``PICOPEEKER_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PORT = "/dev/tty.usbmodem2101"
DEFAULT_BAUDRATE = 115200
DEFAULT_MODEL = "pico2"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Server-wide defaults.

    The port is only a fallback for tools called without one; every
    exchange still opens and closes its own handle.
    """

    port: str = DEFAULT_PORT
    baudrate: int = DEFAULT_BAUDRATE
    model: str = DEFAULT_MODEL
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        baud_text = env.get("PICOPEEKER_BAUDRATE", "")
        try:
            baudrate = int(baud_text) if baud_text else DEFAULT_BAUDRATE
        except ValueError as e:
            raise ValueError(
                f"PICOPEEKER_BAUDRATE must be an integer, got {baud_text!r}"
            ) from e
        return cls(
            port=env.get("PICOPEEKER_PORT", "") or DEFAULT_PORT,
            baudrate=baudrate,
            model=(env.get("PICOPEEKER_MODEL", "") or DEFAULT_MODEL).lower(),
            log_level=(env.get("PICOPEEKER_LOG_LEVEL", "") or DEFAULT_LOG_LEVEL).upper(),
        )
