"""Convert framebuffer snapshots into scaled RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .framebuffer import FrameSnapshot

RGBColor = Tuple[int, int, int]
Palette = Tuple[RGBColor, RGBColor]

# (unlit, lit)
MONOCHROME: Palette = ((0x00, 0x00, 0x00), (0xFF, 0xFF, 0xFF))


def validate_palette(colors: Sequence[RGBColor]) -> Palette:
    """Return ``colors`` as an (unlit, lit) pair of clamped RGB triples."""

    if len(colors) != 2:
        raise ValueError(f"expected an (unlit, lit) colour pair, got {len(colors)} entries")
    unlit, lit = (tuple(int(channel) & 0xFF for channel in color) for color in colors)
    if len(unlit) != 3 or len(lit) != 3:
        raise ValueError("each colour must be an (r, g, b) triple")
    return unlit, lit  # type: ignore[return-value]


@dataclass
class RenderResult:
    """Packed RGB24 pixels for one rendered frame."""

    width: int
    height: int
    pixels: bytearray

    def get_pixel(self, x: int, y: int) -> RGBColor:
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build a surface") from exc
        return pygame.image.frombuffer(bytes(self.pixels), (self.width, self.height), "RGB")


class Renderer:
    """Scale the 1-bit framebuffer into an RGB image."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._background, self._foreground = validate_palette(palette)

    def render(self, frame: FrameSnapshot, *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        rows = len(frame)
        columns = len(frame[0]) if rows else 0
        width = columns * scale
        height = rows * scale

        background = bytes(self._background)
        foreground = bytes(self._foreground)
        pixels = bytearray()
        for row in frame:
            line = bytearray()
            for lit in row:
                line += (foreground if lit else background) * scale
            for _ in range(scale):
                pixels += line
        return RenderResult(width=width, height=height, pixels=pixels)
