"""CHIP-8 hex keypad model and host key mapping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from pychip8.utils import debug_enabled, debug_log


# COSMAC VIP keypad laid over the left-hand block of a QWERTY keyboard.
HOST_KEY_MAP: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


def host_key_to_hex(key_name: str) -> int | None:
    """Translate a host key name into a keypad value, or ``None`` if unmapped."""

    return HOST_KEY_MAP.get(key_name.lower())


@dataclass
class Keypad:
    """Held-key mask plus a single-slot "newly pressed" edge latch."""

    _held: int = 0
    _last_edge: int | None = None

    def key_down(self, value: int) -> None:
        if not 0 <= value <= 0xF:
            if debug_enabled("input"):
                debug_log("input", "ignored_press=%r", value)
            return
        mask = 1 << value
        if self._held & mask:
            return
        self._held |= mask
        self._last_edge = value
        if debug_enabled("input"):
            debug_log("input", "key_down=%X held=%04x", value, self._held)

    def key_up(self, value: int) -> None:
        if not 0 <= value <= 0xF:
            if debug_enabled("input"):
                debug_log("input", "ignored_release=%r", value)
            return
        mask = 1 << value
        if not self._held & mask:
            return
        self._held &= ~mask & 0xFFFF
        if debug_enabled("input"):
            debug_log("input", "key_up=%X held=%04x", value, self._held)

    def is_held(self, value: int) -> bool:
        return bool(self._held & (1 << (value & 0xF)))

    def held_mask(self) -> int:
        return self._held

    def held_keys(self) -> frozenset[int]:
        return frozenset(value for value in range(16) if self._held & (1 << value))

    def peek_edge(self) -> int | None:
        return self._last_edge

    def take_edge(self) -> int | None:
        """Consume the most recent key-down edge, if any."""

        value = self._last_edge
        self._last_edge = None
        return value

    def clear_edge(self) -> None:
        self._last_edge = None

