"""PicoPeeker MCP server: inspect Raspberry Pi Pico memory over a serial link."""

__version__ = "0.1.0"
