"""4 KiB main memory for the CHIP-8 interpreter.

Every access is masked to the 12-bit address space, so programs can never read
or write outside the backing array regardless of what I or PC contain.
"""

from __future__ import annotations

from dataclasses import dataclass, field

RAM_SIZE = 0x1000
ADDRESS_MASK = 0x0FFF


def _mask12(value: int) -> int:
    """Clamp ``value`` to the 12-bit CHIP-8 address space."""

    return value & ADDRESS_MASK


class MemoryError(Exception):
    """Raised when the memory block API is used incorrectly."""


@dataclass
class Memory:
    """Byte-addressable RAM with wrap-around addressing."""

    length: int = RAM_SIZE
    _data: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.length != RAM_SIZE:
            raise MemoryError(f"CHIP-8 memory must be {RAM_SIZE} bytes, got {self.length}")
        self._data = bytearray(self.length)

    def load8(self, address: int) -> int:
        return self._data[_mask12(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[_mask12(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def store16(self, address: int, value: int) -> None:
        self.store8(address, (value >> 8) & 0xFF)
        self.store8(address + 1, value & 0xFF)

    def write_block(self, start: int, data: bytes) -> None:
        """Copy ``data`` into RAM starting at ``start`` without wrapping."""

        if start < 0 or start + len(data) > self.length:
            raise MemoryError(
                f"block of {len(data)} bytes at {start:#05x} runs past end of memory"
            )
        self._data[start : start + len(data)] = data

    def read_block(self, start: int, length: int) -> bytes:
        return bytes(self.load8(start + offset) for offset in range(length))

    def clear(self, start: int = 0, end: int = RAM_SIZE) -> None:
        self._data[start:end] = bytes(end - start)
