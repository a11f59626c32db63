"""Dump formatting: hex-dump parsing and numeric views."""

from .hexdump import HexDump, parse_hex_dump, render_hex_dump
from .views import DisplayMode, format_memory_dump
