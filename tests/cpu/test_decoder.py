"""Tests for CHIP-8 instruction decoding."""

from __future__ import annotations

import pytest

from pychip8.cpu import Chip8CPU, DecodeFault, decode
from pychip8.cpu.errors import CPUError
from pychip8.cpu.opcodes import handler_names


def test_fields_are_split_by_nibble() -> None:
    instruction = decode(0xD12F)

    assert instruction.op == 0xD
    assert instruction.x == 0x1
    assert instruction.y == 0x2
    assert instruction.n == 0xF
    assert instruction.kk == 0x2F
    assert instruction.nnn == 0x12F
    assert instruction.mnemonic == "DRW"


@pytest.mark.parametrize(
    ("word", "mnemonic", "handler"),
    [
        (0x00E0, "CLS", "op_cls"),
        (0x00EE, "RET", "op_ret"),
        (0x0123, "SYS", "op_sys"),
        (0x0000, "SYS", "op_sys"),
        (0x1ABC, "JP", "op_jp"),
        (0x2ABC, "CALL", "op_call"),
        (0x3A12, "SE", "op_se_vx_kk"),
        (0x4A12, "SNE", "op_sne_vx_kk"),
        (0x5AB0, "SE", "op_se_vx_vy"),
        (0x6A12, "LD", "op_ld_vx_kk"),
        (0x7A12, "ADD", "op_add_vx_kk"),
        (0x8AB0, "LD", "op_ld_vx_vy"),
        (0x8AB1, "OR", "op_or"),
        (0x8AB2, "AND", "op_and"),
        (0x8AB3, "XOR", "op_xor"),
        (0x8AB4, "ADD", "op_add_vx_vy"),
        (0x8AB5, "SUB", "op_sub"),
        (0x8AB6, "SHR", "op_shr"),
        (0x8AB7, "SUBN", "op_subn"),
        (0x8ABE, "SHL", "op_shl"),
        (0x9AB0, "SNE", "op_sne_vx_vy"),
        (0xA123, "LD", "op_ld_i"),
        (0xB123, "JP", "op_jp_v0"),
        (0xCA12, "RND", "op_rnd"),
        (0xDAB5, "DRW", "op_drw"),
        (0xEA9E, "SKP", "op_skp"),
        (0xEAA1, "SKNP", "op_sknp"),
        (0xFA07, "LD", "op_ld_vx_dt"),
        (0xFA0A, "LD", "op_ld_vx_key"),
        (0xFA15, "LD", "op_ld_dt_vx"),
        (0xFA18, "LD", "op_ld_st_vx"),
        (0xFA1E, "ADD", "op_add_i_vx"),
        (0xFA29, "LD", "op_ld_f_vx"),
        (0xFA33, "LD", "op_ld_b_vx"),
        (0xFA55, "LD", "op_ld_mem_vx"),
        (0xFA65, "LD", "op_ld_vx_mem"),
    ],
)
def test_decode_selects_handler(word: int, mnemonic: str, handler: str) -> None:
    instruction = decode(word)
    assert instruction.mnemonic == mnemonic
    assert instruction.handler == handler


@pytest.mark.parametrize("word", [0x8008, 0x800D, 0x800F, 0xE000, 0xE09F, 0xF000, 0xF0FF, 0xF056])
def test_unknown_family_words_raise(word: int) -> None:
    with pytest.raises(DecodeFault) as excinfo:
        decode(word)
    assert excinfo.value.word == word
    assert isinstance(excinfo.value, CPUError)


def test_every_handler_exists_on_cpu() -> None:
    for name in handler_names():
        assert callable(getattr(Chip8CPU, name, None)), f"missing handler {name}"


def test_str_includes_word_and_mnemonic() -> None:
    assert str(decode(0x00E0)) == "00E0 CLS"
