"""CHIP-8 CPU: fetch, decode and execute."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable

from pychip8.bus import ADDRESS_MASK, Memory
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Framebuffer, glyph_address

from .errors import CPUError, DecodeFault, StackOverflow, StackUnderflow
from .opcodes import Instruction, decode

PROGRAM_START = 0x200
STACK_DEPTH = 16
REGISTER_COUNT = 16
VF = 0xF

RandomSource = Callable[[], int]


def default_random_source(seed: int | None = None) -> RandomSource:
    rng = random.Random(seed)
    return lambda: rng.getrandbits(8)


@dataclass(frozen=True)
class Quirks:
    """Compatibility switches. The defaults are classic CHIP-8 behaviour."""

    shift_uses_vy: bool = False
    jump_uses_vx: bool = False
    load_store_increments_i: bool = False


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    v: list[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x000
    pc: int = PROGRAM_START
    sp: int = 0
    dt: int = 0
    st: int = 0
    stack: list[int] = field(default_factory=list)

    def clone(self) -> "CPUState":
        return CPUState(list(self.v), self.i, self.pc, self.sp, self.dt, self.st, list(self.stack))


@dataclass
class Chip8CPU:
    """Interpreter core operating on injected memory, display and keypad."""

    memory: Memory
    framebuffer: Framebuffer
    keypad: Keypad
    random_byte: RandomSource = field(default_factory=default_random_source)
    quirks: Quirks = field(default_factory=Quirks)

    state: CPUState = field(default_factory=CPUState)
    halted: bool = False
    waiting_for_key: bool = False
    instruction_count: int = 0
    last_instruction: Instruction | None = None

    def reset(self) -> None:
        """Reset registers, stack and timers. RAM and the display are untouched."""

        self.state = CPUState()
        self.halted = False
        self.waiting_for_key = False
        self.instruction_count = 0
        self.last_instruction = None

    def fetch(self) -> int:
        return self.memory.load16(self.state.pc)

    def step(self) -> Instruction | None:
        """Execute a single instruction and return it, or ``None`` when halted."""

        if self.halted:
            return None

        pc_before = self.state.pc
        word = self.fetch()
        try:
            instruction = decode(word)
        except DecodeFault:
            self.halted = True
            raise DecodeFault(word, pc_before) from None

        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x word=%04x %s", pc_before, word, instruction.mnemonic)

        handler = getattr(self, instruction.handler, None)
        if handler is None:
            self.halted = True
            raise CPUError(f"handler '{instruction.handler}' not implemented")

        try:
            handler(instruction)
        except CPUError:
            self.halted = True
            raise

        # Only a press since the previous step or during Fx0A counts as an edge.
        if instruction.handler != "op_ld_vx_key":
            self.keypad.clear_edge()

        self.instruction_count += 1
        self.last_instruction = instruction
        return instruction

    def tick_timers(self) -> None:
        """Apply one 60 Hz timer period."""

        state = self.state
        if state.dt > 0:
            state.dt -= 1
        if state.st > 0:
            state.st -= 1

    def sound_active(self) -> bool:
        return self.state.st > 0

    # ------------------------------------------------------------------
    # Flow control

    def op_sys(self, _: Instruction) -> None:
        """0nnn: machine-code call, ignored."""

        self._advance()

    def op_cls(self, _: Instruction) -> None:
        self.framebuffer.clear()
        self._advance()

    def op_ret(self, _: Instruction) -> None:
        state = self.state
        if not state.stack:
            raise StackUnderflow(f"RET with empty stack at {state.pc:03X}")
        state.pc = state.stack.pop()
        state.sp = len(state.stack)
        self._advance()

    def op_jp(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn

    def op_call(self, instruction: Instruction) -> None:
        state = self.state
        if len(state.stack) >= STACK_DEPTH:
            raise StackOverflow(f"CALL {instruction.nnn:03X} at {state.pc:03X} exceeds depth {STACK_DEPTH}")
        # RET adds 2 to the pushed address.
        state.stack.append(state.pc)
        state.sp = len(state.stack)
        state.pc = instruction.nnn

    def op_jp_v0(self, instruction: Instruction) -> None:
        if self.quirks.jump_uses_vx:
            offset = self.state.v[instruction.x]
        else:
            offset = self.state.v[0]
        self.state.pc = (instruction.nnn + offset) & ADDRESS_MASK

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_vx_kk(self, instruction: Instruction) -> None:
        self._skip_if(self.state.v[instruction.x] == instruction.kk)

    def op_sne_vx_kk(self, instruction: Instruction) -> None:
        self._skip_if(self.state.v[instruction.x] != instruction.kk)

    def op_se_vx_vy(self, instruction: Instruction) -> None:
        v = self.state.v
        self._skip_if(v[instruction.x] == v[instruction.y])

    def op_sne_vx_vy(self, instruction: Instruction) -> None:
        v = self.state.v
        self._skip_if(v[instruction.x] != v[instruction.y])

    def op_skp(self, instruction: Instruction) -> None:
        self._skip_if(self.keypad.is_held(self.state.v[instruction.x] & 0xF))

    def op_sknp(self, instruction: Instruction) -> None:
        self._skip_if(not self.keypad.is_held(self.state.v[instruction.x] & 0xF))

    # ------------------------------------------------------------------
    # Register loads and arithmetic

    def op_ld_vx_kk(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = instruction.kk
        self._advance()

    def op_add_vx_kk(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = (v[instruction.x] + instruction.kk) & 0xFF
        self._advance()

    def op_ld_vx_vy(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.y]
        self._advance()

    def op_or(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] |= v[instruction.y]
        self._advance()

    def op_and(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] &= v[instruction.y]
        self._advance()

    def op_xor(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] ^= v[instruction.y]
        self._advance()

    # The flag-setting ALU ops write Vx first and VF last, so VF holds the
    # flag when x == 0xF.

    def op_add_vx_vy(self, instruction: Instruction) -> None:
        v = self.state.v
        total = v[instruction.x] + v[instruction.y]
        v[instruction.x] = total & 0xFF
        v[VF] = 1 if total > 0xFF else 0
        self._advance()

    def op_sub(self, instruction: Instruction) -> None:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        v[instruction.x] = (vx - vy) & 0xFF
        v[VF] = 1 if vx >= vy else 0
        self._advance()

    def op_subn(self, instruction: Instruction) -> None:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        v[instruction.x] = (vy - vx) & 0xFF
        v[VF] = 1 if vy >= vx else 0
        self._advance()

    def op_shr(self, instruction: Instruction) -> None:
        v = self.state.v
        source = v[instruction.y] if self.quirks.shift_uses_vy else v[instruction.x]
        v[instruction.x] = source >> 1
        v[VF] = source & 0x01
        self._advance()

    def op_shl(self, instruction: Instruction) -> None:
        v = self.state.v
        source = v[instruction.y] if self.quirks.shift_uses_vy else v[instruction.x]
        v[instruction.x] = (source << 1) & 0xFF
        v[VF] = (source >> 7) & 0x01
        self._advance()

    def op_rnd(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = (self.random_byte() & 0xFF) & instruction.kk
        self._advance()

    # ------------------------------------------------------------------
    # Index register and memory

    def op_ld_i(self, instruction: Instruction) -> None:
        self.state.i = instruction.nnn
        self._advance()

    def op_add_i_vx(self, instruction: Instruction) -> None:
        state = self.state
        state.i = (state.i + state.v[instruction.x]) & 0xFFFF
        self._advance()

    def op_ld_f_vx(self, instruction: Instruction) -> None:
        self.state.i = glyph_address(self.state.v[instruction.x])
        self._advance()

    def op_ld_b_vx(self, instruction: Instruction) -> None:
        state = self.state
        value = state.v[instruction.x]
        self.memory.store8(state.i, value // 100)
        self.memory.store8(state.i + 1, (value // 10) % 10)
        self.memory.store8(state.i + 2, value % 10)
        self._advance()

    def op_ld_mem_vx(self, instruction: Instruction) -> None:
        state = self.state
        for index in range(instruction.x + 1):
            self.memory.store8(state.i + index, state.v[index])
        if self.quirks.load_store_increments_i:
            state.i = (state.i + instruction.x + 1) & 0xFFFF
        self._advance()

    def op_ld_vx_mem(self, instruction: Instruction) -> None:
        state = self.state
        for index in range(instruction.x + 1):
            state.v[index] = self.memory.load8(state.i + index)
        if self.quirks.load_store_increments_i:
            state.i = (state.i + instruction.x + 1) & 0xFFFF
        self._advance()

    # ------------------------------------------------------------------
    # Display

    def op_drw(self, instruction: Instruction) -> None:
        state = self.state
        rows = [self.memory.load8(state.i + r) for r in range(instruction.n)]
        collision = self.framebuffer.draw_sprite(state.v[instruction.x], state.v[instruction.y], rows)
        state.v[VF] = 1 if collision else 0
        self._advance()

    # ------------------------------------------------------------------
    # Timers and keypad

    def op_ld_vx_dt(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.state.dt
        self._advance()

    def op_ld_dt_vx(self, instruction: Instruction) -> None:
        self.state.dt = self.state.v[instruction.x]
        self._advance()

    def op_ld_st_vx(self, instruction: Instruction) -> None:
        self.state.st = self.state.v[instruction.x]
        self._advance()

    def op_ld_vx_key(self, instruction: Instruction) -> None:
        """Fx0A: re-executes without advancing until a key-down edge arrives."""

        value = self.keypad.take_edge()
        if value is None:
            if not self.waiting_for_key and debug_enabled("input"):
                debug_log("input", "waiting_for_key pc=%03x", self.state.pc)
            self.waiting_for_key = True
            return
        self.waiting_for_key = False
        self.state.v[instruction.x] = value
        self._advance()

    # ------------------------------------------------------------------
    # Helpers

    def _advance(self, amount: int = 2) -> None:
        self.state.pc = (self.state.pc + amount) & ADDRESS_MASK

    def _skip_if(self, condition: bool) -> None:
        self._advance(4 if condition else 2)
