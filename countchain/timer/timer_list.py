"""The ordered list of timers shown to the user.

There is always at least one timer: removing or clearing the last one
puts a fresh blank timer in its place.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from PyQt6.QtCore import QObject, pyqtSignal

from .engine import Clock
from .multi import MultiTimer

logger = logging.getLogger(__name__)


class TimerList(QObject):
    """Owns :class:`MultiTimer` objects, addressed by their integer id.

    Signals
    -------
    changed()
        Any contained timer changed (input, title, or timer state).
    structure_changed()
        Timers were added, removed or replaced.
    """

    changed = pyqtSignal()
    structure_changed = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
        timers: Iterable[MultiTimer] = (),
    ) -> None:
        super().__init__(parent)
        self._clock = clock
        self._timers: list[MultiTimer] = []
        for timer in timers:
            self._adopt(timer)
        if not self._timers:
            self._adopt(self._new_timer())

    # ── lookup ────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._timers)

    def __iter__(self) -> Iterator[MultiTimer]:
        return iter(list(self._timers))

    def __getitem__(self, index: int) -> MultiTimer:
        return self._timers[index]

    def to_list(self) -> list[MultiTimer]:
        return list(self._timers)

    def get(self, timer_id: int) -> MultiTimer:
        """Return the timer with *timer_id*.  Raises ``KeyError``."""
        return self._timers[self.index_of(timer_id)]

    def index_of(self, timer_id: int) -> int:
        for index, timer in enumerate(self._timers):
            if timer.id == timer_id:
                return index
        raise KeyError(timer_id)

    @property
    def is_initial(self) -> bool:
        """True for a single blank, unstarted timer."""
        return len(self._timers) == 1 and self._timers[0].is_initial

    @property
    def any_running(self) -> bool:
        return any(t.current.is_running for t in self._timers)

    @property
    def any_paused(self) -> bool:
        return any(t.current.is_paused for t in self._timers)

    # ── mutation ──────────────────────────────────────────────────────

    def add(self, input_text: str = "", title: str = "") -> MultiTimer:
        """Append a new unstarted timer and return it."""
        timer = self._new_timer(input_text=input_text, title=title)
        self._adopt(timer)
        logger.debug("added timer %d", timer.id)
        self.structure_changed.emit()
        return timer

    def remove(self, timer_id: int) -> None:
        """Remove the timer with *timer_id*.  Raises ``KeyError``."""
        self.remove_index(self.index_of(timer_id))

    def remove_index(self, index: int) -> None:
        timer = self._timers.pop(index)
        self._release(timer)
        logger.debug("removed timer %d", timer.id)
        self._replenish()
        self.structure_changed.emit()

    def clear(self) -> None:
        """Drop every timer, leaving one blank timer."""
        for timer in self._timers:
            self._release(timer)
        self._timers.clear()
        self._replenish()
        self.structure_changed.emit()

    def set_timers(self, timers: Iterable[MultiTimer]) -> None:
        """Replace the contents with *timers* (one blank timer if empty)."""
        for timer in self._timers:
            self._release(timer)
        self._timers.clear()
        for timer in timers:
            self._adopt(timer)
        self._replenish()
        self.structure_changed.emit()

    def recompute(self, notify: bool = True) -> None:
        """Recompute every timer; called by the driver on each tick."""
        for timer in list(self._timers):
            timer.recompute(notify)

    # ── internal ──────────────────────────────────────────────────────

    def _new_timer(self, **kwargs) -> MultiTimer:
        return MultiTimer(clock=self._clock, **kwargs)

    def _adopt(self, timer: MultiTimer) -> None:
        timer.setParent(self)
        timer.changed.connect(self.changed)
        self._timers.append(timer)

    def _release(self, timer: MultiTimer) -> None:
        # stop whatever it was doing before letting it go
        timer.reset()
        timer.changed.disconnect(self.changed)
        timer.setParent(None)

    def _replenish(self) -> None:
        if not self._timers:
            self._adopt(self._new_timer())
