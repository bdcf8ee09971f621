"""Units of duration, AM/PM, and millisecond helpers.

Durations throughout countchain are plain :class:`datetime.timedelta`
values kept at millisecond resolution.
"""

from __future__ import annotations

import math
from datetime import timedelta
from enum import Enum, IntEnum

from .errors import InvalidUnit, NaN


# ── millisecond helpers ──────────────────────────────────────────────────

MILLIS_IN_SEC = 1000
SECS_IN_MIN = 60
MINS_IN_HOUR = 60
HOURS_IN_DAY = 24

ZERO = timedelta(0)


def to_millis(duration: timedelta) -> int:
    """Whole milliseconds in *duration*, truncated toward zero."""
    micros = (duration.days * 86_400 + duration.seconds) * 1_000_000 + duration.microseconds
    whole = abs(micros) // 1000
    return whole if micros >= 0 else -whole


def from_millis(millis: int) -> timedelta:
    return timedelta(milliseconds=millis)


def round_to_millis(duration: timedelta) -> timedelta:
    return from_millis(to_millis(duration))


# ── time units ───────────────────────────────────────────────────────────


class TimeUnit(IntEnum):
    """Units of duration, ordered smallest to largest."""

    MILLI = 0
    SEC = 1
    MIN = 2
    HOUR = 3
    DAY = 4

    @classmethod
    def parse(cls, text: str) -> TimeUnit:
        """Look up *text* among the unit spellings.

        Raises :class:`InvalidUnit` when nothing matches.
        """
        for unit, spellings in UNIT_TOKENS.items():
            if text in spellings:
                return unit
        raise InvalidUnit(text)

    def smaller(self) -> TimeUnit | None:
        """The next smaller unit, or ``None`` for milliseconds."""
        if self is TimeUnit.MILLI:
            return None
        return TimeUnit(self - 1)

    def larger(self) -> TimeUnit | None:
        """The next larger unit, or ``None`` for days."""
        if self is TimeUnit.DAY:
            return None
        return TimeUnit(self + 1)

    @property
    def millis(self) -> int:
        return UNIT_MILLIS[self]

    def to_duration(self, value: float) -> timedelta:
        """Convert *value* of this unit into a millisecond-rounded duration."""
        millis = value * self.millis
        if not math.isfinite(millis):
            raise NaN(value)
        try:
            return timedelta(milliseconds=round(millis))
        except OverflowError:
            raise NaN(value) from None


UNIT_TOKENS: dict[TimeUnit, tuple[str, ...]] = {
    TimeUnit.MILLI: (
        "ms", "milli", "millis", "millisec", "millisecs",
        "millisecond", "milliseconds",
    ),
    TimeUnit.SEC: ("s", "sec", "secs", "second", "seconds"),
    TimeUnit.MIN: ("m", "min", "mins", "minute", "minutes"),
    TimeUnit.HOUR: ("h", "hr", "hrs", "hour", "hours"),
    TimeUnit.DAY: ("d", "day", "days"),
}

UNIT_MILLIS: dict[TimeUnit, int] = {
    TimeUnit.MILLI: 1,
    TimeUnit.SEC: MILLIS_IN_SEC,
    TimeUnit.MIN: MILLIS_IN_SEC * SECS_IN_MIN,
    TimeUnit.HOUR: MILLIS_IN_SEC * SECS_IN_MIN * MINS_IN_HOUR,
    TimeUnit.DAY: MILLIS_IN_SEC * SECS_IN_MIN * MINS_IN_HOUR * HOURS_IN_DAY,
}


# ── meridiem ─────────────────────────────────────────────────────────────


class Meridiem(Enum):
    ANTE = "am"
    POST = "pm"

    @classmethod
    def parse(cls, text: str) -> Meridiem:
        if text in AM_TOKENS:
            return cls.ANTE
        if text in PM_TOKENS:
            return cls.POST
        raise InvalidUnit(text)

    def to_24h(self, hour: int) -> int | None:
        """Convert a 12-hour clock *hour* to 24-hour form.

        12am becomes 0 and 12pm stays 12; 0 is treated like 12.
        Returns ``None`` when *hour* is greater than 12.
        """
        if hour > 12:
            return None
        if self is Meridiem.ANTE:
            return 0 if hour == 12 else hour
        return 12 if hour == 12 else hour + 12


AM_TOKENS = ("am", "a.m.")
PM_TOKENS = ("pm", "p.m.")
