"""Instruction decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Mapping

from .errors import DecodeFault


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit instruction word and its canonical fields."""

    word: int
    mnemonic: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.word <= 0xFFFF:
            raise ValueError(f"instruction word out of range: {self.word}")

    @property
    def op(self) -> int:
        return (self.word >> 12) & 0xF

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.word & 0xF

    @property
    def kk(self) -> int:
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        return self.word & 0xFFF

    def __str__(self) -> str:
        return f"{self.word:04X} {self.mnemonic}"


# (mnemonic, handler) pairs keyed by the top nibble.
_PRIMARY: Final[Mapping[int, tuple[str, str]]] = {
    0x1: ("JP", "op_jp"),
    0x2: ("CALL", "op_call"),
    0x3: ("SE", "op_se_vx_kk"),
    0x4: ("SNE", "op_sne_vx_kk"),
    0x5: ("SE", "op_se_vx_vy"),
    0x6: ("LD", "op_ld_vx_kk"),
    0x7: ("ADD", "op_add_vx_kk"),
    0x9: ("SNE", "op_sne_vx_vy"),
    0xA: ("LD", "op_ld_i"),
    0xB: ("JP", "op_jp_v0"),
    0xC: ("RND", "op_rnd"),
    0xD: ("DRW", "op_drw"),
}

# 8xyN sub-dispatch on the low nibble.
_ALU: Final[Mapping[int, tuple[str, str]]] = {
    0x0: ("LD", "op_ld_vx_vy"),
    0x1: ("OR", "op_or"),
    0x2: ("AND", "op_and"),
    0x3: ("XOR", "op_xor"),
    0x4: ("ADD", "op_add_vx_vy"),
    0x5: ("SUB", "op_sub"),
    0x6: ("SHR", "op_shr"),
    0x7: ("SUBN", "op_subn"),
    0xE: ("SHL", "op_shl"),
}

# ExKK sub-dispatch on the low byte.
_KEYS: Final[Mapping[int, tuple[str, str]]] = {
    0x9E: ("SKP", "op_skp"),
    0xA1: ("SKNP", "op_sknp"),
}

# FxKK sub-dispatch on the low byte.
_MISC: Final[Mapping[int, tuple[str, str]]] = {
    0x07: ("LD", "op_ld_vx_dt"),
    0x0A: ("LD", "op_ld_vx_key"),
    0x15: ("LD", "op_ld_dt_vx"),
    0x18: ("LD", "op_ld_st_vx"),
    0x1E: ("ADD", "op_add_i_vx"),
    0x29: ("LD", "op_ld_f_vx"),
    0x33: ("LD", "op_ld_b_vx"),
    0x55: ("LD", "op_ld_mem_vx"),
    0x65: ("LD", "op_ld_vx_mem"),
}


def decode(word: int) -> Instruction:
    """Decode ``word`` into an :class:`Instruction`.

    Raises :class:`DecodeFault` for unknown words in the 0x8, 0xE and 0xF
    families. Any 0x0nnn word other than CLS/RET decodes as SYS.
    """

    word &= 0xFFFF
    op = word >> 12

    if op == 0x0:
        if word == 0x00E0:
            entry = ("CLS", "op_cls")
        elif word == 0x00EE:
            entry = ("RET", "op_ret")
        else:
            entry = ("SYS", "op_sys")
    elif op == 0x8:
        entry = _ALU.get(word & 0xF)
    elif op == 0xE:
        entry = _KEYS.get(word & 0xFF)
    elif op == 0xF:
        entry = _MISC.get(word & 0xFF)
    else:
        entry = _PRIMARY[op]

    if entry is None:
        raise DecodeFault(word)
    mnemonic, handler = entry
    return Instruction(word, mnemonic, handler)


def handler_names() -> frozenset[str]:
    """Every handler name the decoder can produce."""

    names = {"op_cls", "op_ret", "op_sys"}
    for table in (_PRIMARY, _ALU, _KEYS, _MISC):
        names.update(handler for _, handler in table.values())
    return frozenset(names)
