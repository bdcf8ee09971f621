"""A chain of countdowns driven by one multi-duration expression."""

from __future__ import annotations

import itertools
import logging
from datetime import timedelta

from PyQt6.QtCore import QObject, pyqtSignal

from ..interpreter import DurationSequence, interpret_multi, interpret_single
from .engine import Clock, Timer

logger = logging.getLogger(__name__)

_free_ids = itertools.count(1)


class MultiTimer(QObject):
    """Runs the literals of ``input_text`` one after another.

    The current :class:`Timer`'s ``completed`` signal is wired to
    :meth:`next`, so finishing one literal starts the following one.
    When the sequence runs out the last timer simply stays finished.

    Signals
    -------
    changed()
        Input, title, position or the current timer changed.
    """

    changed = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        input_text: str = "",
        title: str = "",
        timer_id: int | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(parent)
        self._input_text = input_text
        self._title = title
        self._id = timer_id if timer_id is not None else next(_free_ids)
        self._sequence = DurationSequence.empty()
        self._consumed = 0

        self._current = Timer(self, clock=clock)
        self._current.completed.connect(self.next)
        self._current.changed.connect(self.changed)

    # ── properties ────────────────────────────────────────────────────

    @property
    def id(self) -> int:
        """Handle for this timer within its list.  Not persisted."""
        return self._id

    @property
    def current(self) -> Timer:
        return self._current

    @property
    def consumed_count(self) -> int:
        """How many literals have been pulled since the last start."""
        return self._consumed

    @property
    def input_text(self) -> str:
        return self._input_text

    @input_text.setter
    def input_text(self, value: str) -> None:
        if value == self._input_text:
            return
        logger.debug("setting input to %r", value)
        self._input_text = value
        self.changed.emit()

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        if value == self._title:
            return
        logger.debug("setting title to %r", value)
        self._title = value
        self.changed.emit()

    @property
    def is_initial(self) -> bool:
        """Blank input and never started."""
        return not self._input_text and not self._current.is_started

    # ── controls ──────────────────────────────────────────────────────

    def start(self) -> None:
        """Interpret ``input_text`` and start its first literal.

        Interpretation errors propagate unchanged and leave the timer
        as it was.
        """
        sequence = interpret_multi(self._input_text)
        self._begin(sequence)

    def _begin(self, sequence: DurationSequence) -> None:
        with self._current.batch():
            self._clear()
            self._sequence = sequence
            self.next()

    def next(self) -> None:
        """Advance to the next literal; no-op once the sequence is spent."""
        literal = self._sequence.next()
        if literal is None:
            logger.debug("sequence exhausted after %d", self._consumed)
            return

        # already validated while interpreting the expression
        duration = interpret_single(literal, now=self._current.clock().astimezone())
        self._consumed += 1
        logger.info("starting %r (#%d)", literal, self._consumed)
        self._current.restart(duration)

    def peek(self) -> str | None:
        """The literal that will run next, without consuming it."""
        return self._sequence.peek()

    @property
    def upcoming(self) -> str | None:
        return self.peek()

    def pause(self) -> None:
        self._current.pause()

    def resume(self) -> None:
        self._current.resume()

    def add_duration(self, delta: timedelta) -> None:
        self._current.add_duration(delta)

    def reset(self) -> None:
        """Stop, forgetting the sequence and the position in it."""
        with self._current.batch():
            self._clear()

    def recompute(self, notify: bool = True) -> None:
        self._current.recompute(notify)

    def _clear(self) -> None:
        self._current.reset()
        self._sequence = DurationSequence.empty()
        self._consumed = 0

    def __repr__(self) -> str:
        return (
            f"<MultiTimer id={self._id} input={self._input_text!r} "
            f"consumed={self._consumed} state={self._current.state.value}>"
        )
