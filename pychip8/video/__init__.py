"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .font import FONT_BASE, FONT_DATA, FONT_GLYPHS, GLYPH_HEIGHT, glyph, glyph_address, install_font
from .framebuffer import HEIGHT, WIDTH, FrameSnapshot, Framebuffer
from .renderer import MONOCHROME, RenderResult, Renderer, validate_palette

__all__ = [
    "FONT_BASE",
    "FONT_DATA",
    "FONT_GLYPHS",
    "GLYPH_HEIGHT",
    "glyph",
    "glyph_address",
    "install_font",
    "Framebuffer",
    "FrameSnapshot",
    "WIDTH",
    "HEIGHT",
    "MONOCHROME",
    "validate_palette",
    "Renderer",
    "RenderResult",
]
