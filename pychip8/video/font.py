"""Built-in hexadecimal font installed in low RAM."""

from __future__ import annotations

from typing import Sequence

from pychip8.bus import Memory

FONT_BASE = 0x000
GLYPH_HEIGHT = 5
GLYPH_COUNT = 16

# 4x5 glyphs stored in the high nibble of each row.
FONT_GLYPHS: tuple[tuple[int, ...], ...] = (
    (0xF0, 0x90, 0x90, 0x90, 0xF0),  # 0
    (0x20, 0x60, 0x20, 0x20, 0x70),  # 1
    (0xF0, 0x10, 0xF0, 0x80, 0xF0),  # 2
    (0xF0, 0x10, 0xF0, 0x10, 0xF0),  # 3
    (0x90, 0x90, 0xF0, 0x10, 0x10),  # 4
    (0xF0, 0x80, 0xF0, 0x10, 0xF0),  # 5
    (0xF0, 0x80, 0xF0, 0x90, 0xF0),  # 6
    (0xF0, 0x10, 0x20, 0x40, 0x40),  # 7
    (0xF0, 0x90, 0xF0, 0x90, 0xF0),  # 8
    (0xF0, 0x90, 0xF0, 0x10, 0xF0),  # 9
    (0xF0, 0x90, 0xF0, 0x90, 0x90),  # A
    (0xE0, 0x90, 0xE0, 0x90, 0xE0),  # B
    (0xF0, 0x80, 0x80, 0x80, 0xF0),  # C
    (0xE0, 0x90, 0x90, 0x90, 0xE0),  # D
    (0xF0, 0x80, 0xF0, 0x80, 0xF0),  # E
    (0xF0, 0x80, 0xF0, 0x80, 0x80),  # F
)

FONT_DATA: bytes = bytes(row for glyph in FONT_GLYPHS for row in glyph)


def glyph_address(digit: int) -> int:
    """Return the RAM address of the glyph for hex ``digit``."""

    return FONT_BASE + GLYPH_HEIGHT * (digit & 0xF)


def glyph(digit: int) -> Sequence[int]:
    return FONT_GLYPHS[digit & 0xF]


def install_font(memory: Memory) -> None:
    memory.write_block(FONT_BASE, FONT_DATA)
