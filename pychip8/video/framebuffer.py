"""64x32 monochrome framebuffer with XOR sprite blitting."""

from __future__ import annotations

from typing import Iterable

WIDTH = 64
HEIGHT = 32

FrameSnapshot = tuple[tuple[bool, ...], ...]


class Framebuffer:
    """Row-major grid of boolean pixels."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("framebuffer dimensions must be positive")
        self.width = width
        self.height = height
        self._rows: list[list[bool]] = [[False] * width for _ in range(height)]

    def clear(self) -> None:
        for row in self._rows:
            row[:] = [False] * self.width

    def get_pixel(self, x: int, y: int) -> bool:
        return self._rows[y % self.height][x % self.width]

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """XOR an 8-pixel-wide sprite at (``x``, ``y``) with wrap-around.

        Returns ``True`` when any lit pixel was switched off.
        """

        collision = False
        for r, bits in enumerate(rows):
            row = self._rows[(y + r) % self.height]
            for c in range(8):
                bit = (bits >> (7 - c)) & 1
                if not bit:
                    continue
                px = (x + c) % self.width
                if row[px]:
                    collision = True
                row[px] = not row[px]
        return collision

    def lit_pixels(self) -> list[tuple[int, int]]:
        return [
            (x, y)
            for y, row in enumerate(self._rows)
            for x, pixel in enumerate(row)
            if pixel
        ]

    def snapshot(self) -> FrameSnapshot:
        return tuple(tuple(row) for row in self._rows)
