"""Timer and CPU cadence helpers driven by a monotonic clock."""

from __future__ import annotations

import math
import time
from typing import Callable

Clock = Callable[[], float]

TIMER_HZ = 60
DEFAULT_CPU_HZ = 600
MIN_CPU_HZ = 1
MAX_CPU_HZ = 10_000

# Absorbs float error when the clock lands exactly on a period boundary.
_EPSILON = 1e-9


class TimerScheduler:
    """Counts whole timer periods elapsed on ``clock`` since the anchor."""

    def __init__(self, clock: Clock = time.monotonic, rate: int = TIMER_HZ) -> None:
        if rate <= 0:
            raise ValueError("timer rate must be positive")
        self._clock = clock
        self._rate = rate
        self._anchor = clock()
        self._ticks = 0

    @property
    def rate(self) -> int:
        return self._rate

    def restart(self) -> None:
        self._anchor = self._clock()
        self._ticks = 0

    def due(self) -> int:
        """Return the number of periods that elapsed since the last call."""

        elapsed = self._clock() - self._anchor
        if elapsed <= 0:
            return 0
        total = math.floor(elapsed * self._rate + _EPSILON)
        pending = total - self._ticks
        if pending <= 0:
            return 0
        self._ticks = total
        return pending


class CpuPacer:
    """Reports how many CPU steps are owed at ``hz`` for the elapsed time."""

    def __init__(self, clock: Clock = time.monotonic, hz: int = DEFAULT_CPU_HZ, *, max_burst: int | None = None) -> None:
        if not MIN_CPU_HZ <= hz <= MAX_CPU_HZ:
            raise ValueError(f"cpu rate must be within {MIN_CPU_HZ}..{MAX_CPU_HZ} Hz, got {hz}")
        self._clock = clock
        self._hz = hz
        # A quarter second of catch-up at most.
        self._max_burst = max_burst if max_burst is not None else max(1, hz // 4)
        self._last = clock()
        self._carry = 0.0

    @property
    def hz(self) -> int:
        return self._hz

    def due(self) -> int:
        now = self._clock()
        elapsed = max(0.0, now - self._last)
        self._last = now
        owed = self._carry + elapsed * self._hz
        steps = math.floor(owed + _EPSILON)
        self._carry = max(0.0, owed - steps)
        if steps > self._max_burst:
            steps = self._max_burst
            self._carry = 0.0
        return steps
