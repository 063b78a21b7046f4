"""Raw CHIP-8 ROM image loader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import RAM_SIZE, Memory

PROGRAM_START = 0x200
MAX_ROM_SIZE = RAM_SIZE - PROGRAM_START  # 3584 bytes


class RomLoadError(RuntimeError):
    """Raised when a ROM image cannot be loaded."""


@dataclass(frozen=True)
class RomImage:
    """A program image as it was copied into RAM."""

    data: bytes
    start: int = PROGRAM_START
    name: str = ""

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        """Last address occupied by the program (``start - 1`` when empty)."""

        return self.start + len(self.data) - 1


def validate_rom(data: bytes) -> bytes:
    payload = bytes(data)
    if len(payload) > MAX_ROM_SIZE:
        raise RomLoadError(f"ROM is {len(payload)} bytes; at most {MAX_ROM_SIZE} fit above {PROGRAM_START:#05x}")
    return payload


def load_rom(data: bytes, memory: Memory, *, name: str = "") -> RomImage:
    """Copy ``data`` into ``memory`` at 0x200, clearing the rest of program RAM."""

    payload = validate_rom(data)
    memory.clear(PROGRAM_START, RAM_SIZE)
    memory.write_block(PROGRAM_START, payload)
    return RomImage(payload, PROGRAM_START, name)


def read_rom(stream: BinaryIO) -> bytes:
    # Read one byte past the limit so oversize images are detected without
    # pulling an arbitrarily large file into memory.
    return validate_rom(stream.read(MAX_ROM_SIZE + 1))


def read_rom_from_path(path: Path) -> bytes:
    try:
        with path.open("rb") as handle:
            return read_rom(handle)
    except FileNotFoundError as exc:
        raise RomLoadError(f"ROM file not found: {path}") from exc
    except IsADirectoryError as exc:
        raise RomLoadError(f"ROM path is a directory: {path}") from exc
    except PermissionError as exc:
        raise RomLoadError(f"ROM file not readable: {path}") from exc


def load_rom_from_path(path: Path, memory: Memory) -> RomImage:
    """Load a ROM image from the filesystem."""

    return load_rom(read_rom_from_path(path), memory, name=path.name)
