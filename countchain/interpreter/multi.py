"""Pratt parser for expressions over several durations.

``+`` chains durations one after another and ``*`` repeats them::

    2h + (15m + 45) * 3     2h, then 15m/45s three times
    3(40h)                  the same as 3 * (40h)
    25m + 5m *              25m, then 5m forever

Operands are either bare integers (repetition counts) or duration
literals.  Every duration literal is checked with the single-duration
interpreter while tokenising, so a bad literal fails the whole
expression with that literal's own error.

Binding powers follow
https://matklad.github.io/2020/04/13/simple-but-powerful-pratt-parsing.html
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import Empty, InvalidOp, UnbalancedParens
from .evaluate import interpret_single

logger = logging.getLogger(__name__)


# ── AST ──────────────────────────────────────────────────────────────────


class Op(Enum):
    ADD = "+"
    MUL = "*"
    LPAREN = "("
    RPAREN = ")"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Int:
    """A bare non-negative integer: a count, or minutes if used alone."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Forever:
    """The count inserted for a trailing ``*``: repeat without end."""

    def __str__(self) -> str:
        return "forever"


@dataclass(frozen=True)
class DurationLiteral:
    """Raw text that parses as one duration."""

    text: str

    def __str__(self) -> str:
        return self.text


Value = Union[Int, Forever, DurationLiteral]


@dataclass(frozen=True)
class Atom:
    value: Value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BinOp:
    op: Op
    left: Node
    right: Node

    def __str__(self) -> str:
        return f"({self.op} {self.left} {self.right})"


Node = Union[Atom, BinOp]


# ── tokenising ───────────────────────────────────────────────────────────

_SPLIT_RE = re.compile(r"([+*()])")
_INT_RE = re.compile(r"[0-9]+")


def _is_value(token) -> bool:
    return not isinstance(token, Op)


def _classify(segment: str):
    if segment in ("+", "*", "(", ")"):
        return Op(segment)
    if _INT_RE.fullmatch(segment):
        return Int(int(segment))
    return DurationLiteral(segment)


def tokenize(text: str) -> list:
    """Split *text* into operators and values.

    Implicit multiplication is inserted between a value or ``)`` and a
    following ``(`` or value, and a ``*`` with no operand after it gets
    a :class:`Forever` count.  Every duration literal must interpret
    as a single duration; its error is raised unchanged otherwise.
    """
    raw = [_classify(s) for s in (p.strip() for p in _SPLIT_RE.split(text)) if s]

    for token in raw:
        if isinstance(token, DurationLiteral):
            interpret_single(token.text)

    tokens: list = []
    for i, token in enumerate(raw):
        following = raw[i + 1] if i + 1 < len(raw) else None
        tokens.append(token)
        if following is None:
            if token is Op.MUL:
                tokens.append(Forever())
            continue

        closes = token is Op.RPAREN or _is_value(token)
        opens = following is Op.LPAREN or _is_value(following)
        if closes and opens:
            tokens.append(Op.MUL)
        elif token is Op.MUL and not opens:
            tokens.append(Forever())
    return tokens


# ── parsing ──────────────────────────────────────────────────────────────

_BINDING_POWER: dict[Op, tuple[int, int]] = {
    Op.ADD: (1, 2),
    Op.MUL: (3, 4),
}


class _Stream:
    def __init__(self, tokens: list) -> None:
        self._tokens = tokens
        self._pos = 0

    def peek(self):
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def next(self):
        token = self.peek()
        if token is not None:
            self._pos += 1
        return token


def _expr(stream: _Stream, min_bp: int) -> Node:
    token = stream.next()
    if token is None:
        raise Empty()
    if token is Op.LPAREN:
        lhs = _expr(stream, 0)
        if stream.next() is not Op.RPAREN:
            raise UnbalancedParens()
    elif isinstance(token, Op):
        raise InvalidOp(str(token))
    else:
        lhs = Atom(token)

    while True:
        op = stream.peek()
        # tokenize puts "*" between adjacent values
        powers = _BINDING_POWER.get(op) if isinstance(op, Op) else None
        if powers is None:
            break
        left_bp, right_bp = powers
        if left_bp < min_bp:
            break

        stream.next()
        try:
            rhs = _expr(stream, right_bp)
        except Empty:
            raise InvalidOp(str(op)) from None
        lhs = BinOp(op, lhs, rhs)

    return lhs


def parse_multi(text: str) -> Node:
    """Parse *text* into an AST of ``+`` and ``*`` nodes.

    Raises :class:`UnbalancedParens` for a missing or stray
    parenthesis, :class:`InvalidOp` for an operator with a missing
    operand, and :class:`Empty` for blank input.
    """
    stream = _Stream(tokenize(text))
    tree = _expr(stream, 0)
    if stream.peek() is not None:
        raise UnbalancedParens()
    logger.debug("parsed %r", text)
    return tree
