"""Shared fixtures: an in-memory stand-in for the serial port."""

from __future__ import annotations

import pytest


class FakeConnection:
    """Scripted replacement for SerialConnection.

    ``reads`` are returned by successive read() calls, the first one being
    consumed by the drain stage; once exhausted every read returns b"".
    """

    def __init__(self, reads=(), open_error=None, write_error=None):
        self.reads = list(reads)
        self.open_error = open_error
        self.write_error = write_error
        self.port = None
        self.baudrate = None
        self.opened = False
        self.closed = False
        self.written: list[bytes] = []
        self.timeouts: list[float] = []
        self.read_sizes: list[int] = []

    def __call__(self, port, baudrate):
        self.port = port
        self.baudrate = baudrate
        return self

    def open(self):
        if self.open_error is not None:
            raise self.open_error
        self.opened = True

    def close(self):
        self.closed = True

    def set_read_timeout(self, seconds):
        self.timeouts.append(seconds)

    def write(self, data):
        if self.write_error is not None:
            raise self.write_error
        self.written.append(data)
        return len(data)

    def read(self, size):
        self.read_sizes.append(size)
        if self.reads:
            item = self.reads.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        return b""


@pytest.fixture
def fake_connection():
    return FakeConnection
