"""Timer package."""

from .engine import Timer, TimerState, utc_now
from .multi import MultiTimer
from .timer_list import TimerList
from .driver import RecomputeDriver
from .serialize import (
    TimerStore,
    snapshot,
    restore,
    dump_timers,
    load_timers,
)

__all__ = [
    "Timer",
    "TimerState",
    "utc_now",
    "MultiTimer",
    "TimerList",
    "RecomputeDriver",
    "TimerStore",
    "snapshot",
    "restore",
    "dump_timers",
    "load_timers",
]
