"""Static device data: memory maps of the supported Pico models."""

from .regions import MemoryRegions, PicoModel, get_memory_regions
