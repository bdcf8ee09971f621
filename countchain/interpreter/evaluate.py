"""Evaluate a token list to a single duration.

Formats
-------
SINGLE_NUMBER   Exactly one token: a bare number of minutes ("23").
TIME            Contains ":" or am/pm: the time until a time of day
                ("5:30pm", "3:" or "17:45").
UNITS           Anything else: numbers followed by units ("1h 30m").
                A trailing number without a unit is read in the unit
                one smaller than the one before it ("2m 30" is 2m 30s).

The format is picked up front from the token shapes; there is no
backtracking into another format once one has been chosen.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, time, timedelta
from enum import Enum, auto

from .errors import (
    ClashingFormats,
    Empty,
    InvalidNumber,
    InvalidTime,
    NaN,
    SmallerThanMilli,
    TooManySeparators,
    TrailingMeridiem,
)
from .lexer import lex
from .tokens import Token, TokenKind, parse_tokens
from .units import ZERO, Meridiem, TimeUnit, from_millis

logger = logging.getLogger(__name__)


class InputFormat(Enum):
    SINGLE_NUMBER = auto()
    TIME = auto()
    UNITS = auto()


def detect_format(tokens: list[Token]) -> InputFormat:
    if len(tokens) == 1:
        return InputFormat.SINGLE_NUMBER
    if any(t.kind in (TokenKind.SEPARATOR, TokenKind.MERIDIEM) for t in tokens):
        return InputFormat.TIME
    return InputFormat.UNITS


def interpret_single(text: str, now: datetime | None = None) -> timedelta:
    """Interpret *text* as one duration.

    >>> interpret_single("3h 20m 10")
    datetime.timedelta(seconds=12010)
    >>> interpret_single("3")
    datetime.timedelta(seconds=180)

    Raises an :class:`~countchain.interpreter.errors.InterpretError`
    subclass describing the first problem found.
    """
    logger.debug("interpreting %r", text)
    return evaluate(parse_tokens(lex(text)), now)


def evaluate(tokens: list[Token], now: datetime | None = None) -> timedelta:
    """Evaluate *tokens* to a duration.

    *now* is only consulted by the TIME format; it defaults to the
    current local time.
    """
    if not tokens:
        raise Empty()

    fmt = detect_format(tokens)
    logger.debug("tokens are in %s format", fmt.name)

    if fmt is InputFormat.SINGLE_NUMBER:
        return _eval_single_number(tokens[0])
    if fmt is InputFormat.TIME:
        return _eval_time(tokens, now)
    return _eval_units(tokens)


# ── single number ────────────────────────────────────────────────────────


def _eval_single_number(token: Token) -> timedelta:
    if token.kind is not TokenKind.NUMBER:
        raise Empty()
    return TimeUnit.MIN.to_duration(token.value)


# ── units ────────────────────────────────────────────────────────────────


def _eval_units(tokens: list[Token]) -> timedelta:
    total = ZERO
    pending: float | None = None
    last_unit: TimeUnit | None = None

    try:
        for token in tokens:
            if token.kind is TokenKind.NUMBER and pending is None:
                pending = token.value
            elif token.kind is TokenKind.UNIT and pending is not None:
                total += token.value.to_duration(pending)
                last_unit = token.value
                pending = None
            else:
                raise ClashingFormats()

        if pending is not None:
            # a lone number can't reach here: it is SINGLE_NUMBER format
            smaller = last_unit.smaller()
            if smaller is None:
                raise SmallerThanMilli(pending)
            logger.debug("trailing %s read as %s", pending, smaller.name)
            total += smaller.to_duration(pending)
    except OverflowError:
        raise NaN() from None

    return total


# ── time of day ──────────────────────────────────────────────────────────


def _local_now() -> datetime:
    return datetime.now().astimezone()


def duration_until(target: time, now: datetime | None = None) -> timedelta:
    """Time from *now* until the next occurrence of *target*.

    Today if *target* is still ahead, otherwise tomorrow, so the result
    is always greater than zero and at most 24 hours.
    """
    if now is None:
        now = _local_now()
    occurrence = now.replace(
        hour=target.hour, minute=target.minute, second=target.second, microsecond=0,
    )
    if not now.time() < target:
        occurrence += timedelta(days=1)
    until = occurrence - now
    return from_millis(math.ceil(until / timedelta(milliseconds=1)))


def _make_time(hour: int, minute: int, second: int, meridiem: Meridiem) -> time:
    hour_24 = meridiem.to_24h(hour)
    if hour_24 is None or minute > 59 or second > 59:
        raise InvalidTime(hour, minute, second)
    return time(hour_24, minute, second)


def _eval_time(tokens: list[Token], now: datetime | None) -> timedelta:
    sections = [0, 0, 0]  # hour, minute, second
    current = 0
    meridiem: Meridiem | None = None

    for token in tokens:
        if meridiem is not None:
            raise TrailingMeridiem()

        if token.kind is TokenKind.SEPARATOR:
            current += 1
            if current > 2:
                raise TooManySeparators()
        elif token.kind is TokenKind.NUMBER:
            if not token.value.is_integer():
                raise InvalidNumber(str(token.value))
            sections[current] = int(token.value)
        elif token.kind is TokenKind.MERIDIEM:
            meridiem = token.value
        else:
            raise ClashingFormats()

    hour, minute, second = sections
    if now is None:
        now = _local_now()

    if meridiem is not None:
        logger.debug("time %d:%02d:%02d %s", hour, minute, second, meridiem.value)
        return duration_until(_make_time(hour, minute, second, meridiem), now)

    if hour > 12:
        # only one reading exists: 24-hour clock
        if hour > 23 or minute > 59 or second > 59:
            raise InvalidTime(hour, minute, second)
        return duration_until(time(hour, minute, second), now)

    # no am/pm: whichever of the two is coming up first
    am = duration_until(_make_time(hour, minute, second, Meridiem.ANTE), now)
    pm = duration_until(_make_time(hour, minute, second, Meridiem.POST), now)
    logger.debug("time %d:%02d:%02d, closest of am/pm", hour, minute, second)
    return min(am, pm)
