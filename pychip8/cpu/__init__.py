"""CPU package for the CHIP-8 interpreter."""

from .core import PROGRAM_START, STACK_DEPTH, Chip8CPU, CPUState, Quirks
from .errors import CPUError, DecodeFault, StackOverflow, StackUnderflow
from .opcodes import Instruction, decode
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "Quirks",
    "CPUError",
    "DecodeFault",
    "StackOverflow",
    "StackUnderflow",
    "Instruction",
    "decode",
    "opcodes",
    "PROGRAM_START",
    "STACK_DEPTH",
]
