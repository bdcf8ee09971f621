"""Turn lexed groups into validated tokens."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidNumber, InvalidUnit
from .lexer import Group, GroupKind
from .units import Meridiem, TimeUnit


class TokenKind(Enum):
    NUMBER = "number"
    UNIT = "unit"
    MERIDIEM = "meridiem"
    SEPARATOR = "separator"


@dataclass(frozen=True)
class Token:
    """A validated token.

    ``value`` is a finite float for NUMBER, a :class:`TimeUnit` for
    UNIT, a :class:`Meridiem` for MERIDIEM and ``None`` for SEPARATOR.
    """

    kind: TokenKind
    value: float | TimeUnit | Meridiem | None = None

    @classmethod
    def number(cls, value: float) -> Token:
        return cls(TokenKind.NUMBER, value)

    @classmethod
    def unit(cls, unit: TimeUnit) -> Token:
        return cls(TokenKind.UNIT, unit)

    @classmethod
    def meridiem(cls, meridiem: Meridiem) -> Token:
        return cls(TokenKind.MERIDIEM, meridiem)

    @classmethod
    def separator(cls) -> Token:
        return cls(TokenKind.SEPARATOR)


def _parse_number(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise InvalidNumber(text) from None
    if not math.isfinite(value):
        raise InvalidNumber(text)
    return value


def _parse_text(text: str) -> Token:
    try:
        return Token.unit(TimeUnit.parse(text))
    except InvalidUnit:
        pass
    return Token.meridiem(Meridiem.parse(text))


def parse_group(group: Group) -> Token:
    if group.kind is GroupKind.NUMBER:
        return Token.number(_parse_number(group.text))
    if group.kind is GroupKind.TEXT:
        return _parse_text(group.text)
    return Token.separator()


def parse_tokens(groups: list[Group]) -> list[Token]:
    """Map every group to a token, failing on the first invalid one."""
    return [parse_group(group) for group in groups]
