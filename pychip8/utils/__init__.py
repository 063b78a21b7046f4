"""Utility helpers for the CHIP-8 interpreter."""

from .debug import debug_enabled, debug_log
from .trace import TraceEntry, TraceRecorder

__all__ = [
    "debug_enabled",
    "debug_log",
    "TraceEntry",
    "TraceRecorder",
]
