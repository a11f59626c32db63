"""MCP server entry point for PicoPeeker.

Exposes memory inspection of a Raspberry Pi Pico as tools, resources and
prompts via the Model Context Protocol, using the official Python MCP SDK
with stdio transport.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any, Callable

import anyio
from mcp.server.fastmcp import FastMCP

from .config import Settings
from .errors import PicoPeekerError, ValidationError
from .formatting.views import DisplayMode, format_memory_dump
from .models.regions import QUICK_ACCESS, get_memory_regions
from .protocol.commands import DUMP_TERMINATOR, TERMINATORS, TIMINGS
from .protocol.parser import parse_search_matches
from .protocol.patterns import PatternType, to_hex_pattern
from .protocol.session import SerialSession
from .protocol.validation import validate_address, validate_length, validate_port
from .worker import ExchangeRunner, Update

logger = logging.getLogger(__name__)

settings = Settings.from_env()

mcp = FastMCP(
    "picopeeker",
    instructions="Inspect Raspberry Pi Pico memory over a serial link",
)

_session = SerialSession(baudrate=settings.baudrate)
_runner = ExchangeRunner()

SEARCH_REGIONS = {
    "sram": ("search_memory", "Searching SRAM (this may take 5-10 seconds)..."),
    "flash": ("search_flash", "Searching Flash (this may take 30-60 seconds for 4MB)..."),
}


def _resolve_port(port: str) -> str:
    return validate_port(port or settings.port)


def _error(e: Exception) -> dict[str, Any]:
    """Turn an exception into a tool result naming the failed stage."""
    stage = getattr(e, "stage", "unknown")
    return {"error": str(e), "stage": stage}


async def _run_exchange(port: str, label: str, fn: Callable[..., str], *args: Any) -> str:
    """Run a blocking exchange on a worker thread so the event loop stays free."""
    return await anyio.to_thread.run_sync(_runner.run, port, label, fn, *args)


def _display_mode(name: str) -> DisplayMode:
    try:
        return DisplayMode(name)
    except ValueError:
        raise ValidationError(
            f"Unknown display mode '{name}'. Valid: {[m.value for m in DisplayMode]}"
        ) from None


# ─── DEVICE TOOLS ────────────────────────────────────────────────────

@mcp.tool()
async def fetch_landmarks(port: str = "") -> dict[str, Any]:
    """Ask the device for its landmark addresses (named globals, main, ...).

    Args:
        port: Serial port of the Pico. Defaults to PICOPEEKER_PORT.
    """
    try:
        port = _resolve_port(port)
        summary = await _run_exchange(port, "landmarks", _session.fetch_landmarks)
    except PicoPeekerError as e:
        return _error(e)
    return {"port": port, "landmarks": summary}


@mcp.tool()
async def read_memory(
    address: str = "0x20000000",
    length: str = "256",
    display_mode: str = DisplayMode.BYTES.value,
    port: str = "",
) -> dict[str, Any]:
    """Dump a memory range and show it as bytes, words or floats.

    Args:
        address: Start address, 0x-prefixed hex (e.g. 0x20000000).
        length: Number of bytes, 1-4096.
        display_mode: "Bytes (Hex)", "16-bit Words", "32-bit Words" or
                      "Float (32-bit)".
        port: Serial port of the Pico. Defaults to PICOPEEKER_PORT.
    """
    try:
        port = _resolve_port(port)
        validate_address(address)
        validate_length(length)
        mode = _display_mode(display_mode)
        raw = await _run_exchange(port, "read", _session.read_memory, address, length)
    except PicoPeekerError as e:
        return _error(e)

    return {
        "port": port,
        "address": address,
        "length": length,
        "display_mode": mode.value,
        "complete": DUMP_TERMINATOR in raw,
        "result": format_memory_dump(raw, mode),
    }


@mcp.tool()
async def search_memory(
    pattern: str,
    pattern_type: str = PatternType.HEX.value,
    region: str = "sram",
    port: str = "",
) -> dict[str, Any]:
    """Search SRAM or flash for a byte pattern.

    Args:
        pattern: Hex bytes (DEADBEEF), an ASCII string, or a decimal int.
        pattern_type: "Hex Bytes", "ASCII String" or "32-bit Int (LE)"
                      (also accepts hex, ascii, int32).
        region: "sram" or "flash". Flash searches can take up to two minutes.
        port: Serial port of the Pico. Defaults to PICOPEEKER_PORT.
    """
    key = region.strip().lower()
    if key not in SEARCH_REGIONS:
        return {"error": f"Unknown region '{region}'. Valid: {list(SEARCH_REGIONS)}"}
    method_name, progress = SEARCH_REGIONS[key]

    try:
        port = _resolve_port(port)
        pattern_hex = to_hex_pattern(pattern, PatternType.from_name(pattern_type))
        _runner.post(Update(text=progress, port=port, label="search"))
        raw = await _run_exchange(
            port, "search", getattr(_session, method_name), pattern_hex
        )
    except PicoPeekerError as e:
        return _error(e)

    matches = parse_search_matches(raw)
    return {
        "port": port,
        "region": key,
        "pattern_hex": pattern_hex,
        "complete": DUMP_TERMINATOR in raw,
        "matches": [f"0x{a:08x}" for a in matches.addresses],
        "total": matches.total,
        "limit_reached": matches.limit_reached,
        "result": raw,
    }


# ─── OFFLINE TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def format_dump(raw: str, display_mode: str = DisplayMode.WORD32.value) -> dict[str, Any]:
    """Re-render a previously captured READ transcript in another view.

    Args:
        raw: The hex-dump text returned by read_memory in "Bytes (Hex)" mode.
        display_mode: Target view.
    """
    try:
        mode = _display_mode(display_mode)
    except ValidationError as e:
        return _error(e)
    return {"display_mode": mode.value, "result": format_memory_dump(raw, mode)}


@mcp.tool()
def get_updates() -> dict[str, Any]:
    """Return status and result messages queued since the last call."""
    return {"updates": [asdict(u) for u in _runner.drain()]}


@mcp.tool()
def memory_regions(model: str = "") -> dict[str, Any]:
    """Describe the SRAM/flash layout of a Pico model.

    Args:
        model: "pico1" / "Pico 1 (RP2040)" or "pico2" / "Pico 2 (RP2350)".
               Defaults to PICOPEEKER_MODEL.
    """
    regions = get_memory_regions(model or settings.model)
    result = regions.to_dict()
    result["quick_access"] = {name: f"0x{a:08x}" for name, a in QUICK_ACCESS.items()}
    return result


# ─── RESOURCES ───────────────────────────────────────────────────────

@mcp.resource("picopeeker://regions")
def resource_regions() -> str:
    """Memory layout of the configured Pico model."""
    return json.dumps(memory_regions())


@mcp.resource("picopeeker://protocol")
def resource_protocol() -> str:
    """Serial command table: terminators and deadlines per command."""
    commands = [
        {
            "command": kind.value,
            "terminator": TERMINATORS[kind],
            "deadline_s": TIMINGS[kind].deadline,
        }
        for kind in TIMINGS
    ]
    return json.dumps({"baudrate": settings.baudrate, "commands": commands})


# ─── PROMPTS ─────────────────────────────────────────────────────────

@mcp.prompt()
def explore_memory(goal: str) -> str:
    """Guide an inspection session on the attached Pico.

    Args:
        goal: What to find out (e.g., "where is global_var and what is its value").
    """
    return f"""Inspect the Pico's memory to answer: {goal}

Steps:
- Call fetch_landmarks to get known addresses (globals, main).
- Use read_memory at a landmark address; try "32-bit Words" for ints
  and "Float (32-bit)" for floats.
- Use search_memory to locate a known value (hex, ASCII or int32).
- Use memory_regions to stay inside valid SRAM/flash ranges.

Only one command can run on a port at a time."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
