"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .rom import (
    MAX_ROM_SIZE,
    PROGRAM_START,
    RomImage,
    RomLoadError,
    load_rom,
    load_rom_from_path,
    read_rom,
    read_rom_from_path,
)

__all__ = [
    "MAX_ROM_SIZE",
    "PROGRAM_START",
    "RomImage",
    "RomLoadError",
    "load_rom",
    "load_rom_from_path",
    "read_rom",
    "read_rom_from_path",
]
