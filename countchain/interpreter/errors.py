"""Error types raised while interpreting duration input.

Every failure is an :class:`InterpretError`, so callers that only want
to show a message can catch the base class and use ``str(err)``.  The
subclasses exist so tests and callers can tell the reasons apart.

The ``Unknown`` family covers adjacency problems that don't fit the
other reasons.  It is split into a few narrower subclasses which are
still caught by ``except Unknown``.
"""

from __future__ import annotations


class InterpretError(ValueError):
    """Base class for every duration-interpretation failure."""

    message = "Invalid input"

    def __str__(self) -> str:
        return self.message.format(*self.args)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


# ── lexical ──────────────────────────────────────────────────────────────


class NaN(InterpretError):
    message = "Unknown number"


class InvalidCharacter(InterpretError):
    message = 'Invalid character "{0}"'


class InvalidNumber(InterpretError):
    message = 'Invalid number "{0}"'


class InvalidUnit(InterpretError):
    message = 'Invalid unit "{0}"'


# ── single duration ──────────────────────────────────────────────────────


class SmallerThanMilli(InterpretError):
    message = 'Value "{0}" is less than a millisecond'


class ClashingFormats(InterpretError):
    message = "Multiple formats detected"


class TooManySeparators(InterpretError):
    message = 'Maximum of 2 ":"s allowed'


class Empty(InterpretError):
    message = "No input provided"


class Unknown(InterpretError):
    message = "Invalid input"


class TrailingMeridiem(Unknown):
    message = 'Nothing may follow "am" or "pm"'


class InvalidTime(Unknown):
    message = "{0}:{1:02d}:{2:02d} is not a valid time"


# ── multi expression ─────────────────────────────────────────────────────


class UnbalancedParens(InterpretError):
    message = "Unbalanced parentheses"


class InvalidOp(InterpretError):
    message = 'Unexpected operator "{0}"'


class MulDurations(InterpretError):
    message = "Cannot multiply two durations together"
