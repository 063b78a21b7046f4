"""Square-wave tone played while the sound timer is running."""

from __future__ import annotations

from array import array
from typing import Optional


class SquareWaveBeeper:
    """Manage a looping square-wave tone using pygame's mixer."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = 440.0,
        volume: float = 0.25,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")
        if frequency <= 0.0:
            raise ValueError("frequency must be positive")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._frequency = frequency
        self._volume = max(0.0, min(1.0, volume))
        self._sound = self._build_sound()
        self._channel: Optional["pygame.mixer.Channel"] = None
        self._playing = False

    @property
    def playing(self) -> bool:
        return self._playing

    def set_state(self, enabled: bool) -> None:
        """Start or stop the tone. Repeated calls with the same state are no-ops."""

        if enabled == self._playing:
            return
        if enabled:
            self._start()
        else:
            self._stop()

    def shutdown(self) -> None:
        """Stop any active tone and release the channel."""

        self._stop()
        self._channel = None

    def _start(self) -> None:
        channel = self._channel
        if channel is None:
            channel = self._pygame.mixer.find_channel(True)
            if channel is None:
                return
            self._channel = channel
        channel.play(self._sound, loops=-1)
        channel.set_volume(self._volume)
        self._playing = True

    def _stop(self) -> None:
        if self._channel is not None:
            self._channel.stop()
        self._playing = False

    def _build_sound(self):
        period = max(2, int(round(self._sample_rate / self._frequency)))
        half = period // 2
        amplitude = 12_000
        buffer = array("h", [amplitude] * half + [-amplitude] * (period - half))
        return self._pygame.mixer.Sound(buffer=buffer.tobytes())


__all__ = ["SquareWaveBeeper"]
