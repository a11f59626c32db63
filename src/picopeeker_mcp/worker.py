"""Background execution of exchanges and the bounded update channel.

Workers never share mutable state with their consumer. Each finished
exchange becomes an immutable :class:`Update` posted to a bounded queue;
the single consumer drains it whenever it likes. Posting never blocks: if
the consumer has fallen behind, the update is dropped and logged.

Exchanges on the same port are serialized with a per-port lock, since the
firmware handles one command at a time and interleaved answers cannot be
told apart.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_SIZE = 10


@dataclass(frozen=True)
class Update:
    """One message on the update channel."""

    text: str
    port: str = ""
    label: str = ""
    error: bool = False


class ExchangeRunner:
    """Runs exchanges one-at-a-time per port and reports their results."""

    def __init__(self, channel_size: int = DEFAULT_CHANNEL_SIZE) -> None:
        self._channel: queue.Queue[Update] = queue.Queue(maxsize=channel_size)
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, port: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(port)
            if lock is None:
                lock = self._locks[port] = threading.Lock()
            return lock

    def post(self, update: Update) -> bool:
        """Queue ``update`` without blocking. Returns False if it was dropped."""
        try:
            self._channel.put_nowait(update)
        except queue.Full:
            logger.warning("Update channel full, dropping %r from %s", update.label, update.port)
            return False
        return True

    def drain(self) -> list[Update]:
        """Take every update currently queued, oldest first."""
        updates: list[Update] = []
        while True:
            try:
                updates.append(self._channel.get_nowait())
            except queue.Empty:
                return updates

    def run(self, port: str, label: str, fn: Callable[..., str], *args: Any) -> str:
        """Run ``fn(port, *args)`` while holding the port's lock.

        The outcome is posted to the channel (errors as ``"Error: ..."``)
        and also returned or re-raised to the caller.
        """
        with self._lock_for(port):
            logger.debug("%s on %s started", label, port)
            try:
                text = fn(port, *args)
            except Exception as e:
                self.post(Update(text=f"Error: {e}", port=port, label=label, error=True))
                raise
        self.post(Update(text=text, port=port, label=label))
        return text

