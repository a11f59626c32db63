"""Memory maps of the supported Pico boards."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum

ROM_BASE = 0x00000000
FLASH_BASE = 0x10000000
SRAM_BASE = 0x20000000
GPIO_BASE = 0x40028000

# Starting points offered to the operator when picking a READ address
QUICK_ACCESS: dict[str, int] = {
    "ROM": ROM_BASE,
    "Flash": FLASH_BASE,
    "SRAM": SRAM_BASE,
    "GPIO": GPIO_BASE,
}


class PicoModel(Enum):
    PICO1 = "Pico 1 (RP2040)"
    PICO2 = "Pico 2 (RP2350)"

    @classmethod
    def from_name(cls, name: str) -> PicoModel:
        """Resolve a display name or short alias; unknown names mean Pico 2."""
        key = (name or "").strip().lower().replace(" ", "")
        if key in ("pico1", "rp2040", "pico1(rp2040)"):
            return cls.PICO1
        return cls.PICO2


@dataclass(frozen=True)
class MemoryRegions:
    """SRAM and flash sizes for one board."""

    sram_size: str
    flash_size: str
    sram_bytes: int
    flash_bytes: int

    @property
    def sram_range(self) -> tuple[int, int]:
        return SRAM_BASE, SRAM_BASE + self.sram_bytes - 1

    @property
    def flash_range(self) -> tuple[int, int]:
        return FLASH_BASE, FLASH_BASE + self.flash_bytes - 1

    def to_dict(self) -> dict:
        result = asdict(self)
        result["sram_range"] = [f"0x{a:08x}" for a in self.sram_range]
        result["flash_range"] = [f"0x{a:08x}" for a in self.flash_range]
        return result


_REGIONS = {
    PicoModel.PICO1: MemoryRegions(
        sram_size="264KB", flash_size="2MB", sram_bytes=0x42000, flash_bytes=0x200000
    ),
    PicoModel.PICO2: MemoryRegions(
        sram_size="520KB", flash_size="4MB", sram_bytes=0x82000, flash_bytes=0x400000
    ),
}


def get_memory_regions(model: PicoModel | str = PicoModel.PICO2) -> MemoryRegions:
    if isinstance(model, str):
        model = PicoModel.from_name(model)
    return _REGIONS[model]
