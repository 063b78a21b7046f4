"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import Machine, MachineConfig, create_machine
from .scheduler import DEFAULT_CPU_HZ, TIMER_HZ, CpuPacer, TimerScheduler

__all__ = [
    "MachineConfig",
    "Machine",
    "create_machine",
    "CpuPacer",
    "TimerScheduler",
    "DEFAULT_CPU_HZ",
    "TIMER_HZ",
]
