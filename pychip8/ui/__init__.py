"""User interface layer for the CHIP-8 interpreter."""

from .app import AppConfig, Chip8App
from .file_picker import pick_rom_file

__all__ = [
    "AppConfig",
    "Chip8App",
    "pick_rom_file",
]
