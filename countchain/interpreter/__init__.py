"""Duration interpreter package.

Two entry points:

``interpret_single(text)``
    One duration: "3" (minutes), "1h 30m", "2m 30" (2m 30s), "5:30pm",
    "3:" (3 o'clock, whichever of am/pm comes first).

``interpret_multi(text)``
    A chain of durations joined with ``+`` and repeated with ``*``:
    "25m + 5m", "(25m + 5m) * 4", "3(40h)", "1h + 10m*" (forever).
"""

from .errors import (
    InterpretError,
    NaN,
    InvalidCharacter,
    InvalidNumber,
    InvalidUnit,
    SmallerThanMilli,
    ClashingFormats,
    TooManySeparators,
    Empty,
    Unknown,
    TrailingMeridiem,
    InvalidTime,
    UnbalancedParens,
    InvalidOp,
    MulDurations,
)
from .evaluate import interpret_single, duration_until
from .multi import parse_multi
from .sequence import DurationSequence, interpret_multi
from .units import TimeUnit, Meridiem, to_millis, from_millis

__all__ = [
    "interpret_single",
    "interpret_multi",
    "parse_multi",
    "duration_until",
    "DurationSequence",
    "TimeUnit",
    "Meridiem",
    "to_millis",
    "from_millis",
    "InterpretError",
    "NaN",
    "InvalidCharacter",
    "InvalidNumber",
    "InvalidUnit",
    "SmallerThanMilli",
    "ClashingFormats",
    "TooManySeparators",
    "Empty",
    "Unknown",
    "TrailingMeridiem",
    "InvalidTime",
    "UnbalancedParens",
    "InvalidOp",
    "MulDurations",
]
