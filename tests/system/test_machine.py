"""Tests for the host-facing CHIP-8 machine contract."""

from __future__ import annotations

import pytest

from pychip8.cpu import DecodeFault, Quirks, StackUnderflow
from pychip8.loader import RomLoadError
from pychip8.system import MachineConfig, create_machine
from pychip8.utils import TraceRecorder
from pychip8.video import FONT_DATA


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_machine(rom: bytes = b"", **overrides):
    clock = overrides.pop("clock", FakeClock())
    config = MachineConfig(clock=clock, random_byte=lambda: 0xA5, **overrides)
    machine = create_machine(config)
    machine.load(rom)
    return machine, clock


def steps(machine, count: int) -> None:
    for _ in range(count):
        machine.step()


def test_new_machine_has_font_and_blank_screen() -> None:
    machine = create_machine()

    assert machine.memory.read_block(0, len(FONT_DATA)) == FONT_DATA
    assert machine.cpu.state.pc == 0x200
    assert all(not pixel for row in machine.framebuffer() for pixel in row)
    assert not machine.audio_on()


def test_framebuffer_snapshot_is_row_major_and_immutable() -> None:
    machine, _ = make_machine(bytes.fromhex("A000 6000 6100 D011"))
    steps(machine, 4)

    frame = machine.framebuffer()
    assert len(frame) == 32
    assert all(len(row) == 64 for row in frame)
    assert frame[0][:5] == (True, True, True, True, False)
    with pytest.raises(TypeError):
        frame[0][0] = False  # type: ignore[index]


def test_scenario_add_with_carry() -> None:
    machine, _ = make_machine(bytes.fromhex("6AFF 6B01 8AB4"))
    steps(machine, 3)
    assert machine.cpu.state.v[0xA] == 0
    assert machine.cpu.state.v[0xF] == 1
    assert machine.cpu.state.pc == 0x206


def test_scenario_subtract_without_borrow() -> None:
    machine, _ = make_machine(bytes.fromhex("6A05 6B02 8AB5"))
    steps(machine, 3)
    assert machine.cpu.state.v[0xA] == 3
    assert machine.cpu.state.v[0xF] == 1


def test_scenario_call_return_round_trip() -> None:
    machine, _ = make_machine(bytes.fromhex("2206 0000 0000 00EE"))

    machine.step()
    assert machine.cpu.state.pc == 0x206
    assert machine.cpu.state.sp == 1

    machine.step()
    state = machine.cpu.state
    assert state.pc == 0x202
    assert state.stack == []
    assert state.sp == 0


def test_call_into_subroutine_body_then_return() -> None:
    machine, _ = make_machine(bytes.fromhex("2204 0000 0000 00EE"))
    steps(machine, 2)
    assert machine.cpu.state.pc == 0x206

    machine.step()
    assert machine.cpu.state.pc == 0x202
    assert machine.cpu.state.sp == 0


def test_scenario_draw_zero_glyph() -> None:
    machine, _ = make_machine(bytes.fromhex("A000 6000 6100 D015"))
    steps(machine, 4)

    lit = {(x, y) for y, row in enumerate(machine.framebuffer()) for x, pixel in enumerate(row) if pixel}
    expected = {(x, 0) for x in range(4)} | {(x, 4) for x in range(4)}
    expected |= {(0, y) for y in (1, 2, 3)} | {(3, y) for y in (1, 2, 3)}
    assert lit == expected
    assert machine.cpu.state.v[0xF] == 0


def test_scenario_draw_twice_collides() -> None:
    machine, _ = make_machine(bytes.fromhex("A000 6000 6100 D015 D015"))
    steps(machine, 5)
    assert all(not pixel for row in machine.framebuffer() for pixel in row)
    assert machine.cpu.state.v[0xF] == 1


def test_scenario_wait_for_key() -> None:
    machine, _ = make_machine(bytes.fromhex("F10A"))
    for _ in range(10):
        machine.step()
    assert machine.cpu.state.pc == 0x200

    machine.key_down(0x7)
    machine.step()

    assert machine.cpu.state.v[1] == 7
    assert machine.cpu.state.pc == 0x202
    assert machine.keypad.is_held(0x7)


def test_timers_continue_during_key_wait() -> None:
    machine, clock = make_machine(bytes.fromhex("6A3C FA15 F10A"))
    steps(machine, 2)
    assert machine.cpu.state.dt == 60

    clock.advance(0.5)
    machine.step()
    assert machine.cpu.state.dt == 30
    assert machine.cpu.state.pc == 0x204


def test_delay_timer_follows_elapsed_time() -> None:
    machine, clock = make_machine(bytes.fromhex("6AC8 FA15 1204"))
    steps(machine, 2)
    assert machine.cpu.state.dt == 200

    for elapsed_ticks in (1, 7, 60, 199, 200, 500):
        clock.now = elapsed_ticks / 60
        machine.step()
        assert machine.cpu.state.dt == max(0, 200 - elapsed_ticks)


def test_timers_tick_before_instruction() -> None:
    # Fx07 in the same step as a due tick observes the decremented value.
    machine, clock = make_machine(bytes.fromhex("6A05 FA15 FB07"))
    steps(machine, 2)
    clock.advance(1 / 60)
    machine.step()
    assert machine.cpu.state.v[0xB] == 4


def test_audio_callback_fires_on_transitions() -> None:
    events: list[bool] = []
    machine, clock = make_machine(bytes.fromhex("6A02 FA18 1204"), audio_callback=events.append)

    steps(machine, 2)
    assert machine.audio_on()
    assert events == [True]

    clock.advance(1 / 60)
    machine.step()
    assert events == [True]

    clock.advance(1 / 60)
    machine.step()
    assert not machine.audio_on()
    assert events == [True, False]


def test_manual_timer_ticks() -> None:
    events: list[bool] = []
    machine, _ = make_machine(bytes.fromhex("6A01 FA18"), audio_callback=events.append)
    steps(machine, 2)

    machine.tick_timers(3)

    assert machine.cpu.state.st == 0
    assert events == [True, False]


def test_load_rejects_oversize_rom() -> None:
    machine = create_machine()
    with pytest.raises(RomLoadError):
        machine.load(bytes(3585))


def test_load_accepts_maximum_size() -> None:
    machine = create_machine()
    image = machine.load(bytes([0x12]) * 3584)
    assert image.size == 3584
    assert machine.memory.load8(0xFFF) == 0x12


def test_load_resets_state_but_keeps_font() -> None:
    machine, _ = make_machine(bytes.fromhex("6A05 FA15 FA18 A000 D015 A123 2300"))
    steps(machine, 7)
    assert machine.cpu.state.sp == 1
    assert any(pixel for row in machine.framebuffer() for pixel in row)
    machine.memory.store8(0x003, 0x00)  # programs may overwrite the font

    machine.load(bytes.fromhex("1200"))

    state = machine.cpu.state
    assert state.pc == 0x200
    assert state.v == [0] * 16
    assert state.i == 0
    assert state.dt == 0 and state.st == 0
    assert state.stack == [] and state.sp == 0
    assert all(not pixel for row in machine.framebuffer() for pixel in row)
    assert machine.memory.load8(0x202) == 0
    assert machine.memory.read_block(0, 3) == FONT_DATA[:3]
    assert not machine.audio_on()


def test_fault_halts_and_notifies() -> None:
    faults = []
    machine, _ = make_machine(bytes.fromhex("00EE"), fault_callback=faults.append)

    with pytest.raises(StackUnderflow):
        machine.step()

    assert machine.halted
    assert isinstance(machine.fault, StackUnderflow)
    assert len(faults) == 1
    assert machine.step() is None


def test_reset_recovers_from_fault() -> None:
    machine, _ = make_machine(bytes.fromhex("6001 8009"))
    machine.step()
    with pytest.raises(DecodeFault):
        machine.step()

    machine.reset()

    assert not machine.halted
    assert machine.fault is None
    assert machine.cpu.state.pc == 0x200
    machine.step()
    assert machine.cpu.state.v[0] == 1


def test_run_stops_on_request_and_on_halt() -> None:
    machine, _ = make_machine(bytes.fromhex("1200"))
    assert machine.run(25) == 25

    machine.request_stop()
    assert machine.run(25) == 0

    machine, _ = make_machine(bytes.fromhex("6000 0000 00EE"))
    with pytest.raises(StackUnderflow):
        machine.run(10)
    assert machine.cpu.instruction_count == 2


def test_quirks_flow_through_config() -> None:
    machine, _ = make_machine(bytes.fromhex("6004 6180 8016"), quirks=Quirks(shift_uses_vy=True))
    steps(machine, 3)
    assert machine.cpu.state.v[0] == 0x40


def test_random_source_is_injected() -> None:
    machine, _ = make_machine(bytes.fromhex("C3F0"))
    machine.step()
    assert machine.cpu.state.v[3] == 0xA0


def test_trace_records_steps_and_faults() -> None:
    trace = TraceRecorder(8)
    machine, _ = make_machine(bytes.fromhex("6A01 F10A 0000"), trace=trace)
    steps(machine, 2)

    entries = list(trace.entries())
    assert [entry.mnemonic for entry in entries] == ["LD", "LD"]
    assert entries[0].pc == 0x200
    assert entries[1].note == "wait-key"

    machine.key_down(0x3)
    machine.step()
    machine.step()
    machine.cpu.memory.store16(0x206, 0xFFFF)
    with pytest.raises(DecodeFault):
        machine.step()
    last = trace.last_entry()
    assert last is not None
    assert last.halted
    assert last.note == "DecodeFault"
