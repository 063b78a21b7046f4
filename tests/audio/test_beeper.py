"""Tests for the square-wave beeper against a stand-in mixer."""

from __future__ import annotations

import sys
from types import SimpleNamespace

import pytest

from pychip8.audio import SquareWaveBeeper


class FakeChannel:
    def __init__(self) -> None:
        self.plays = 0
        self.stops = 0
        self.volume = None

    def play(self, sound, loops=0) -> None:
        self.plays += 1
        self.loops = loops

    def stop(self) -> None:
        self.stops += 1

    def set_volume(self, volume: float) -> None:
        self.volume = volume


class FakeSound:
    def __init__(self, buffer: bytes) -> None:
        self.buffer = buffer


def install_fake_pygame(monkeypatch, *, initialised: bool = True) -> FakeChannel:
    channel = FakeChannel()
    mixer = SimpleNamespace(
        get_init=lambda: (44_100, -16, 1) if initialised else None,
        find_channel=lambda force=False: channel,
        Sound=FakeSound,
        Channel=FakeChannel,
    )
    monkeypatch.setitem(sys.modules, "pygame", SimpleNamespace(mixer=mixer))
    return channel


def test_tone_starts_and_stops_on_transitions(monkeypatch) -> None:
    channel = install_fake_pygame(monkeypatch)
    beeper = SquareWaveBeeper(sample_rate=44_100, frequency=441.0)

    beeper.set_state(True)
    beeper.set_state(True)
    assert beeper.playing
    assert channel.plays == 1
    assert channel.loops == -1

    beeper.set_state(False)
    assert not beeper.playing
    assert channel.stops == 1


def test_square_wave_buffer_has_one_period(monkeypatch) -> None:
    install_fake_pygame(monkeypatch)
    beeper = SquareWaveBeeper(sample_rate=44_100, frequency=441.0)
    # 100 samples of 16-bit audio
    assert len(beeper._sound.buffer) == 200


def test_requires_initialised_mixer(monkeypatch) -> None:
    install_fake_pygame(monkeypatch, initialised=False)
    with pytest.raises(RuntimeError):
        SquareWaveBeeper()


def test_shutdown_stops_tone(monkeypatch) -> None:
    channel = install_fake_pygame(monkeypatch)
    beeper = SquareWaveBeeper()
    beeper.set_state(True)
    beeper.shutdown()
    assert channel.stops == 1
    assert not beeper.playing
