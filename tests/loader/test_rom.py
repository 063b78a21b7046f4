"""Tests for the raw ROM loader."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from pychip8.bus import Memory
from pychip8.loader import MAX_ROM_SIZE, RomLoadError, load_rom, load_rom_from_path, read_rom
from pychip8.video import FONT_DATA, install_font


def make_memory() -> Memory:
    memory = Memory()
    install_font(memory)
    return memory


def test_load_copies_program_at_0x200() -> None:
    memory = make_memory()

    image = load_rom(bytes([0x12, 0x34, 0x56]), memory)

    assert image.start == 0x200
    assert image.size == 3
    assert image.end == 0x202
    assert memory.read_block(0x200, 4) == bytes([0x12, 0x34, 0x56, 0x00])
    assert memory.read_block(0, len(FONT_DATA)) == FONT_DATA


def test_load_clears_previous_program() -> None:
    memory = make_memory()
    load_rom(bytes([0xFF] * 16), memory)
    load_rom(bytes([0x01]), memory)
    assert memory.read_block(0x200, 3) == bytes([0x01, 0x00, 0x00])


def test_oversize_rom_is_rejected() -> None:
    memory = make_memory()
    with pytest.raises(RomLoadError):
        load_rom(bytes(MAX_ROM_SIZE + 1), memory)
    assert memory.load8(0x200) == 0


def test_empty_rom_loads() -> None:
    image = load_rom(b"", make_memory())
    assert image.size == 0


def test_read_rom_detects_oversize_stream() -> None:
    assert read_rom(io.BytesIO(bytes(MAX_ROM_SIZE))) == bytes(MAX_ROM_SIZE)
    with pytest.raises(RomLoadError):
        read_rom(io.BytesIO(bytes(MAX_ROM_SIZE * 2)))


def test_load_from_path(tmp_path: Path) -> None:
    rom_path = tmp_path / "pong.ch8"
    rom_path.write_bytes(bytes([0x00, 0xE0]))
    memory = make_memory()

    image = load_rom_from_path(rom_path, memory)

    assert image.name == "pong.ch8"
    assert memory.load16(0x200) == 0x00E0


def test_missing_path_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(RomLoadError):
        load_rom_from_path(tmp_path / "missing.ch8", make_memory())


def test_directory_path_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(RomLoadError):
        load_rom_from_path(tmp_path, make_memory())
