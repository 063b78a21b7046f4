"""Pygame frontend for the CHIP-8 interpreter."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pychip8.audio import SquareWaveBeeper
from pychip8.cpu import CPUError, Quirks
from pychip8.io import host_key_to_hex
from pychip8.loader import RomLoadError, read_rom_from_path
from pychip8.system import CpuPacer, DEFAULT_CPU_HZ, Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import HEIGHT, WIDTH, MONOCHROME, Renderer


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 emulator frontend."""

    rom_path: Optional[Path] = None
    scale: int = 20
    cpu_hz: int = DEFAULT_CPU_HZ
    quirks: Quirks = field(default_factory=Quirks)
    mute: bool = False


class Chip8App:
    """Thin wrapper around the Pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._beeper: SquareWaveBeeper | None = None
        self._pygame = None
        self._fault_message: str | None = None
        self._perf_enabled = debug_enabled("perf")
        self._frame_counter = 0
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def machine(self) -> Machine | None:
        return self._machine

    @property
    def fault_message(self) -> str | None:
        return self._fault_message

    def load_machine(self) -> Machine:
        """Read the configured ROM and build a machine ready to run it."""

        rom_path = self._config.rom_path
        if rom_path is None:
            raise RuntimeError("ROM image is required; pass a path or pick a file")
        try:
            rom = read_rom_from_path(rom_path)
        except RomLoadError as exc:
            raise RuntimeError(str(exc)) from exc

        machine = create_machine(
            MachineConfig(
                audio_callback=self._handle_audio,
                fault_callback=self._handle_fault,
                quirks=self._config.quirks,
                trace=self._trace_recorder,
            )
        )
        try:
            machine.load(rom)
        except RomLoadError as exc:
            raise RuntimeError(f"Failed to load {rom_path}: {exc}") from exc
        self._machine = machine
        return machine

    def run(self) -> None:
        # Load before opening the window so a bad ROM fails fast.
        machine = self.load_machine()

        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        self._pygame = pygame
        self._update_caption()

        if not self._config.mute:
            self._initialise_audio(pygame)

        scale = self._config.scale
        screen = pygame.display.set_mode((WIDTH * scale, HEIGHT * scale))
        renderer = Renderer(MONOCHROME)
        clock = pygame.time.Clock()
        pacer = CpuPacer(time.monotonic, self._config.cpu_hz)
        self._running = True

        while self._running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_BACKSPACE:
                    self._reset_machine(machine)
                elif event.type == pygame.KEYDOWN:
                    self._handle_key_event(pygame, event.key, pressed=True)
                elif event.type == pygame.KEYUP:
                    self._handle_key_event(pygame, event.key, pressed=False)

            frame_start = time.perf_counter()
            executed = self.run_steps(pacer.due())

            frame = renderer.render(machine.framebuffer(), scale=scale)
            screen.blit(frame.to_surface(), (0, 0))
            pygame.display.flip()

            if self._perf_enabled:
                debug_log(
                    "perf",
                    "frame=%d steps=%d frame_ms=%.3f",
                    self._frame_counter,
                    executed,
                    (time.perf_counter() - frame_start) * 1000.0,
                )

            clock.tick(_FRAME_RATE)
            self._frame_counter += 1

        if self._beeper is not None:
            self._beeper.shutdown()
        pygame.quit()

    def run_steps(self, steps: int) -> int:
        """Execute up to ``steps`` instructions, stopping at a fault."""

        machine = self._machine
        if machine is None:
            return 0
        executed = 0
        for _ in range(steps):
            if machine.halted:
                break
            try:
                machine.step()
            except CPUError:
                break
            executed += 1
        return executed

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        value = host_key_to_hex(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s value=%s pressed=%s", name, value, pressed)
        if value is None:
            return
        if pressed:
            machine.key_down(value)
        else:
            machine.key_up(value)

    def _handle_audio(self, enabled: bool) -> None:
        if self._beeper is not None:
            self._beeper.set_state(enabled)

    def _handle_fault(self, exc: CPUError) -> None:
        self._fault_message = f"{type(exc).__name__}: {exc}"
        if debug_enabled("cpu"):
            debug_log("cpu", "halted %s", self._fault_message)
        if self._trace_recorder is not None:
            self._trace_recorder.dump("trace", 32)
        if self._beeper is not None:
            self._beeper.set_state(False)
        self._update_caption()

    def _reset_machine(self, machine: Machine) -> None:
        machine.reset()
        self._fault_message = None
        self._update_caption()

    def _update_caption(self) -> None:
        pygame = self._pygame
        if pygame is None:
            return
        title = "CHIP-8"
        if self._config.rom_path is not None:
            title = f"CHIP-8 - {self._config.rom_path.name}"
        if self._fault_message:
            title = f"{title} [halted: {self._fault_message}; Backspace resets]"
        pygame.display.set_caption(title)


_FRAME_RATE = 60
