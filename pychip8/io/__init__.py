"""Input helpers for the CHIP-8 interpreter."""

from .keyboard import HOST_KEY_MAP, Keypad, host_key_to_hex

__all__ = [
    "HOST_KEY_MAP",
    "Keypad",
    "host_key_to_hex",
]
