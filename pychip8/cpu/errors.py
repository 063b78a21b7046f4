"""Faults raised by the CHIP-8 core."""

from __future__ import annotations


class CPUError(Exception):
    """Base error for faults that halt the interpreter."""


class DecodeFault(CPUError):
    """Raised when an instruction word does not name a CHIP-8 instruction."""

    def __init__(self, word: int, pc: int | None = None) -> None:
        self.word = word & 0xFFFF
        self.pc = pc
        location = "" if pc is None else f" at {pc:03X}"
        super().__init__(f"unknown instruction {self.word:04X}{location}")


class StackUnderflow(CPUError):
    """Raised by RET when the call stack is empty."""


class StackOverflow(CPUError):
    """Raised by CALL when the call stack is already full."""
