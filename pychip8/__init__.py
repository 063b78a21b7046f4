"""CHIP-8 interpreter.

The core (``cpu``, ``bus``, ``video``, ``io``, ``loader``, ``system``) has no
third-party dependencies; ``audio`` and ``ui`` drive pygame at the edges.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
