"""Bus-related helpers for the CHIP-8 interpreter."""

from .memory import ADDRESS_MASK, RAM_SIZE, Memory, MemoryError

__all__ = [
    "ADDRESS_MASK",
    "RAM_SIZE",
    "Memory",
    "MemoryError",
]
