"""CHIP-8 machine assembly and host-facing step contract."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from pychip8.bus import Memory
from pychip8.cpu import Chip8CPU, CPUError, Instruction, Quirks
from pychip8.cpu.core import RandomSource, default_random_source
from pychip8.io import Keypad
from pychip8.loader import RomImage, load_rom
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import FrameSnapshot, Framebuffer, install_font

from .scheduler import Clock, TimerScheduler

AudioCallback = Callable[[bool], None]
FaultCallback = Callable[[CPUError], None]


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    random_byte: RandomSource = field(default_factory=default_random_source)
    clock: Clock = time.monotonic
    audio_callback: Optional[AudioCallback] = None
    fault_callback: Optional[FaultCallback] = None
    quirks: Quirks = field(default_factory=Quirks)
    trace: Optional[TraceRecorder] = None


@dataclass
class Machine:
    """Aggregates the interpreter components behind a small host API."""

    memory: Memory
    cpu: Chip8CPU
    framebuffer_device: Framebuffer
    keypad: Keypad
    timers: TimerScheduler
    audio_callback: Optional[AudioCallback] = None
    fault_callback: Optional[FaultCallback] = None
    trace: Optional[TraceRecorder] = None
    rom: Optional[RomImage] = None
    fault: Optional[CPUError] = None
    stop_requested: bool = False
    _audio_state: bool = False

    # ------------------------------------------------------------------
    # Program loading

    def load(self, rom: bytes) -> RomImage:
        """Load ``rom`` at 0x200 and reset everything except the font."""

        image = load_rom(rom, self.memory)
        self.rom = image
        self._reset_core()
        if debug_enabled("loader"):
            debug_log("loader", "loaded %d bytes", image.size)
        return image

    def reset(self) -> None:
        """Restart the most recently loaded ROM from a clean state."""

        if self.rom is None:
            self._reset_core()
            return
        self.load(self.rom.data)

    def _reset_core(self) -> None:
        self.cpu.reset()
        self.framebuffer_device.clear()
        self.keypad.clear_edge()
        self.timers.restart()
        self.fault = None
        self.stop_requested = False
        if self.trace is not None:
            self.trace.clear()
        self._sync_audio()

    # ------------------------------------------------------------------
    # Execution

    @property
    def halted(self) -> bool:
        return self.cpu.halted

    def step(self) -> Instruction | None:
        """Advance due timer periods, then execute one instruction.

        Faults halt the core, notify ``fault_callback`` and propagate.
        """

        self._advance_timers()
        if self.cpu.halted:
            return None

        state_before = self.cpu.state.clone() if self.trace is not None else None
        try:
            instruction = self.cpu.step()
        except CPUError as exc:
            self.fault = exc
            if self.trace is not None and state_before is not None:
                self.trace.record_step(
                    state_before,
                    getattr(exc, "word", None),
                    halted=True,
                    note=type(exc).__name__,
                )
            if debug_enabled("cpu"):
                debug_log("cpu", "fault=%s", exc)
            if self.fault_callback is not None:
                self.fault_callback(exc)
            raise

        if self.trace is not None and state_before is not None and instruction is not None:
            self.trace.record_step(
                state_before,
                instruction.word,
                halted=False,
                mnemonic=instruction.mnemonic,
                note="wait-key" if self.cpu.waiting_for_key else "",
            )
        self._sync_audio()
        return instruction

    def run(self, max_steps: int) -> int:
        """Execute up to ``max_steps`` instructions; return how many ran."""

        executed = 0
        while executed < max_steps and not self.stop_requested and not self.cpu.halted:
            self.step()
            executed += 1
        return executed

    def request_stop(self) -> None:
        """Ask :meth:`run` to return at the next step boundary."""

        self.stop_requested = True

    def tick_timers(self, count: int = 1) -> None:
        """Apply ``count`` timer periods regardless of the clock."""

        for _ in range(count):
            self.cpu.tick_timers()
            self._sync_audio()

    def _advance_timers(self) -> None:
        due = self.timers.due()
        if due == 0:
            return
        state = self.cpu.state
        # Only the final values matter once a timer saturates at zero.
        due = min(due, max(state.dt, state.st, 1))
        if debug_enabled("timer"):
            debug_log("timer", "ticks=%d dt=%d st=%d", due, state.dt, state.st)
        self.tick_timers(due)

    # ------------------------------------------------------------------
    # Keypad and outputs

    def key_down(self, value: int) -> None:
        self.keypad.key_down(value)

    def key_up(self, value: int) -> None:
        self.keypad.key_up(value)

    def framebuffer(self) -> FrameSnapshot:
        return self.framebuffer_device.snapshot()

    def audio_on(self) -> bool:
        return self.cpu.sound_active()

    def _sync_audio(self) -> None:
        active = self.cpu.sound_active()
        if active == self._audio_state:
            return
        self._audio_state = active
        if debug_enabled("timer"):
            debug_log("timer", "tone=%s", "on" if active else "off")
        if self.audio_callback is not None:
            self.audio_callback(active)


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a CHIP-8 machine with the font installed and PC at 0x200."""

    config = config or MachineConfig()

    memory = Memory()
    install_font(memory)

    framebuffer = Framebuffer()
    keypad = Keypad()
    cpu = Chip8CPU(
        memory,
        framebuffer,
        keypad,
        random_byte=config.random_byte,
        quirks=config.quirks,
    )
    cpu.reset()

    return Machine(
        memory=memory,
        cpu=cpu,
        framebuffer_device=framebuffer,
        keypad=keypad,
        timers=TimerScheduler(config.clock),
        audio_callback=config.audio_callback,
        fault_callback=config.fault_callback,
        trace=config.trace,
    )
