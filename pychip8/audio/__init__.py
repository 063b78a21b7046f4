"""Audio output for the CHIP-8 interpreter."""

from .beeper import SquareWaveBeeper

__all__ = ["SquareWaveBeeper"]
