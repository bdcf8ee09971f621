"""Evaluate a multi-duration AST into a lazy sequence of literals.

Evaluation does not produce the literals themselves.  It folds the AST
into a small immutable *plan*:

Literal(text)           one duration literal
Concat(parts)           the parts, one after another
Repeat(body, times)     *body* repeated *times* times, or forever

A :class:`DurationSequence` walks a plan with an explicit stack of
``(node, position)`` frames.  Copying the stack is enough to snapshot
the cursor, and an unbounded repeat is never expanded ahead of time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Iterator, Union

from .errors import InvalidOp, MulDurations
from .evaluate import interpret_single
from .multi import Atom, Forever, Int, Node, Op, parse_multi

logger = logging.getLogger(__name__)


# ── plan ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Literal:
    text: str

    @property
    def is_empty(self) -> bool:
        return False


@dataclass(frozen=True)
class Concat:
    parts: tuple[Plan, ...]

    @cached_property
    def is_empty(self) -> bool:
        return all(part.is_empty for part in self.parts)


@dataclass(frozen=True)
class Repeat:
    body: Plan
    times: int | None  # None: without end

    @cached_property
    def is_empty(self) -> bool:
        return self.times == 0 or self.body.is_empty


Plan = Union[Literal, Concat, Repeat]


# ── folding ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class _Count:
    """An operand still usable as a repetition count."""

    times: int | None


def _as_plan(value: _Count | Plan) -> Plan:
    if not isinstance(value, _Count):
        return value
    if value.times is None:
        # parse_multi only ever puts Forever on the right of "*"
        raise InvalidOp(str(Op.MUL))
    text = str(value.times)
    # a bare integer reads as minutes; reject it now if that overflows
    interpret_single(text)
    return Literal(text)


def _concat(left: Plan, right: Plan) -> Concat:
    parts: list[Plan] = []
    for plan in (left, right):
        if isinstance(plan, Concat):
            parts.extend(plan.parts)
        else:
            parts.append(plan)
    return Concat(tuple(parts))


def _repeat(body: Plan, times: int | None) -> Repeat:
    if not isinstance(body, Repeat):
        return Repeat(body, times)
    if body.times == 0 or times == 0:
        return Repeat(body.body, 0)
    if body.times is None or times is None:
        return Repeat(body.body, None)
    return Repeat(body.body, body.times * times)


def _leaf(value) -> _Count | Plan:
    if isinstance(value, Int):
        return _Count(value.value)
    if isinstance(value, Forever):
        return _Count(None)
    return Literal(value.text)


def _combine(op: Op, left: _Count | Plan, right: _Count | Plan) -> _Count | Plan:
    if op is Op.ADD:
        return _concat(_as_plan(left), _as_plan(right))

    left_count = isinstance(left, _Count)
    right_count = isinstance(right, _Count)
    if not (left_count or right_count):
        raise MulDurations()
    if left_count and not right_count:
        return _repeat(right, left.times)
    # duration * count, or value * count when both are integers
    return _repeat(_as_plan(left), right.times)


def _fold(tree: Node) -> _Count | Plan:
    # post-order walk with an explicit stack; long chains nest deeply on one side
    results: list[_Count | Plan] = []
    stack: list[tuple[Node, bool]] = [(tree, False)]
    while stack:
        node, visited = stack.pop()
        if isinstance(node, Atom):
            results.append(_leaf(node.value))
        elif visited:
            right = results.pop()
            left = results.pop()
            results.append(_combine(node.op, left, right))
        else:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
    return results.pop()


def evaluate_multi(tree: Node) -> DurationSequence:
    """Fold *tree* into a :class:`DurationSequence`."""
    return DurationSequence(_as_plan(_fold(tree)))


def interpret_multi(text: str) -> DurationSequence:
    """Interpret *text* as a chain of durations.

    >>> list(interpret_multi("(10m + 45) * 2"))
    ['10m', '45', '10m', '45']

    Raises an :class:`~countchain.interpreter.errors.InterpretError`
    subclass when the expression or any literal in it is invalid.
    """
    return evaluate_multi(parse_multi(text))


# ── cursor ───────────────────────────────────────────────────────────────

_UNSET = object()


class DurationSequence:
    """A peekable, possibly endless stream of duration literals."""

    def __init__(self, plan: Plan | None = None) -> None:
        self._frames: list[tuple[Plan, int]] = []
        if plan is not None and not plan.is_empty:
            self._frames.append((plan, 0))
        self._peeked = _UNSET

    @classmethod
    def empty(cls) -> DurationSequence:
        return cls(None)

    def _advance(self) -> str | None:
        frames = self._frames
        while frames:
            node, position = frames.pop()
            if isinstance(node, Literal):
                return node.text
            if isinstance(node, Concat):
                if position < len(node.parts):
                    frames.append((node, position + 1))
                    part = node.parts[position]
                    if not part.is_empty:
                        frames.append((part, 0))
            elif node.times is None:
                frames.append((node, 0))
                frames.append((node.body, 0))
            elif position < node.times:
                frames.append((node, position + 1))
                frames.append((node.body, 0))
        return None

    def next(self) -> str | None:
        """Consume and return the next literal, or ``None`` at the end."""
        if self._peeked is not _UNSET:
            literal, self._peeked = self._peeked, _UNSET
            return literal
        return self._advance()

    def peek(self) -> str | None:
        """Return the next literal without consuming it."""
        if self._peeked is _UNSET:
            self._peeked = self._advance()
        return self._peeked

    def snapshot(self) -> DurationSequence:
        """An independent cursor at the same position."""
        copy = DurationSequence.__new__(DurationSequence)
        copy._frames = list(self._frames)
        copy._peeked = self._peeked
        return copy

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        literal = self.next()
        if literal is None:
            raise StopIteration
        return literal

    def __repr__(self) -> str:
        return f"<DurationSequence next={self.peek()!r}>"
