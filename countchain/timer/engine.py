"""Countdown timer state machine for countchain.

States
------
UNSTARTED     No duration yet; waiting for ``start``.
RUNNING       Counting down.
PAUSED        Frozen; the end time keeps moving while paused.
FINISHED      Remaining time reached 0.  The timer keeps running into
              overtime (negative remaining) until reset or restarted.

Transitions
-----------
UNSTARTED → RUNNING                 (start / restart)
RUNNING → PAUSED                    (pause)
PAUSED → RUNNING                    (resume)
RUNNING → FINISHED                  (recompute sees remaining <= 0)
Any → UNSTARTED                     (reset)
Any → RUNNING                       (restart)

Timekeeping
-----------
Only wall-clock instants are stored: when the timer started, when the
current pause began, and how long earlier pauses lasted.  Elapsed and
remaining time are derived from those on demand, so nothing drifts
between ticks.  ``remaining`` / ``end_time`` are live; the cached
``time_remaining`` / ``projected_end`` only move when ``recompute`` is
called by the driver.

Adding time
-----------
``add_duration`` with a negative amount that would take the timer past
0 stops at exactly 0 and unpauses, so overtime starts counting.  Adding
a positive amount to a finished timer restarts it with that amount.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from ..interpreter.units import ZERO, round_to_millis

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    UNSTARTED = "unstarted"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ── timer ─────────────────────────────────────────────────────────────────


class Timer(QObject):
    """A single countdown with pause/resume and overtime.

    Signals
    -------
    changed()
        Emitted once after any public mutation, and by ``recompute``
        when the finished flag flips.  Multi-field updates such as
        ``restart`` emit a single ``changed`` at the end.
    completed()
        Emitted exactly once per run, from ``recompute``, when the
        remaining time first reaches 0.  State is already updated
        when it fires.
    tick(remaining: timedelta | None)
        Emitted by every ``recompute`` with the fresh remaining time.
    """

    changed = pyqtSignal()
    completed = pyqtSignal()
    tick = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
        on_finish: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self._clock: Clock = clock or utc_now

        # ── bookkeeping ───────────────────────────────────────────────
        self._total_duration: timedelta | None = None
        self._start_time: datetime | None = None
        self._last_pause_time: datetime | None = None
        self._accumulated_paused: timedelta = ZERO

        # ── cached observables (refreshed by recompute) ───────────────
        self._time_remaining: timedelta | None = None
        self._projected_end: datetime | None = None
        self._completion_sent: bool = False

        # ── change batching ───────────────────────────────────────────
        self._batch_depth: int = 0
        self._dirty: bool = False

        self._on_finish: Callable[[], None] | None = None
        if on_finish is not None:
            self.set_on_finish(on_finish)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def total_duration(self) -> timedelta | None:
        """The full length of this run, including added time."""
        return self._total_duration

    @property
    def start_time(self) -> datetime | None:
        return self._start_time

    @property
    def last_pause_time(self) -> datetime | None:
        """When the current pause began; ``None`` unless paused."""
        return self._last_pause_time

    @property
    def accumulated_paused(self) -> timedelta:
        """Length of all finished pauses (not the current one)."""
        return self._accumulated_paused

    @property
    def is_started(self) -> bool:
        return self._start_time is not None

    @property
    def is_paused(self) -> bool:
        return self.is_started and self._last_pause_time is not None

    @property
    def is_running(self) -> bool:
        """True when started and not paused (overtime included)."""
        return self.is_started and not self.is_paused

    @property
    def is_finished(self) -> bool:
        """True once the cached remaining time has reached 0."""
        return self._time_remaining is not None and self._time_remaining <= ZERO

    @property
    def state(self) -> TimerState:
        if not self.is_started:
            return TimerState.UNSTARTED
        if self.is_finished:
            return TimerState.FINISHED
        if self.is_paused:
            return TimerState.PAUSED
        return TimerState.RUNNING

    @property
    def time_remaining(self) -> timedelta | None:
        """Remaining time as of the last ``recompute``."""
        return self._time_remaining

    @property
    def projected_end(self) -> datetime | None:
        """End time as of the last ``recompute``."""
        return self._projected_end

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current run."""
        if not self._total_duration or self._total_duration <= ZERO:
            return 1.0 if self.is_started else 0.0
        fraction = self.elapsed() / self._total_duration
        return max(0.0, min(1.0, fraction))

    def set_on_finish(self, callback: Callable[[], None] | None) -> None:
        """Replace the callback connected to ``completed``."""
        if self._on_finish is not None:
            try:
                self.completed.disconnect(self._on_finish)
            except TypeError:
                pass
        self._on_finish = callback
        if callback is not None:
            self.completed.connect(callback)

    # ══════════════════════════════════════════════════════════════════
    #  QUERIES
    # ══════════════════════════════════════════════════════════════════

    def elapsed(self) -> timedelta:
        """Time spent running, excluding pauses.  0 if unstarted."""
        if self._start_time is None:
            return ZERO
        until = self._last_pause_time or self._clock()
        return (until - self._start_time) - self._accumulated_paused

    def remaining(self) -> timedelta | None:
        """Time left right now; negative in overtime, ``None`` if unstarted."""
        if self._start_time is None or self._total_duration is None:
            return None
        return round_to_millis(self._total_duration - self.elapsed())

    def end_time(self) -> datetime | None:
        """When the timer reaches 0, as if it were resumed now.

        ``None`` when not started, or when that instant is past the
        last representable date.
        """
        remaining = self.remaining()
        if remaining is None:
            return None
        try:
            return self._clock() + remaining
        except OverflowError:
            return None

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, duration: timedelta) -> None:
        """Start counting down *duration* from now.  Always succeeds."""
        logger.debug("starting timer with duration %s", duration)
        with self.batch():
            self._start_time = self._clock()
            self._total_duration = round_to_millis(duration)
            self._last_pause_time = None
            self._accumulated_paused = ZERO
            self._completion_sent = False
            self._refresh_cache()
            self._mark_changed()

    def reset(self) -> None:
        """Return to UNSTARTED."""
        logger.debug("resetting timer")
        with self.batch():
            self._start_time = None
            self._total_duration = None
            self._last_pause_time = None
            self._accumulated_paused = ZERO
            self._completion_sent = False
            self._refresh_cache()
            self._mark_changed()

    def restart(self, duration: timedelta) -> None:
        """``reset`` then ``start``, seen by observers as one change."""
        logger.debug("restarting timer")
        with self.batch():
            self.reset()
            self.start(duration)

    def pause(self) -> None:
        """Freeze the countdown.  No-op if unstarted or already paused."""
        if not self.is_started:
            logger.info("timer not started, pause did nothing")
            return
        if self.is_paused:
            logger.info("timer already paused, pause did nothing")
            return
        with self.batch():
            self._last_pause_time = self._clock()
            self._refresh_cache()
            self._mark_changed()

    def resume(self) -> None:
        """Continue after ``pause``.  No-op if not paused."""
        if not self.is_paused:
            logger.info("timer not paused, resume did nothing")
            return
        with self.batch():
            self._accumulated_paused += self._clock() - self._last_pause_time
            self._last_pause_time = None
            self._refresh_cache()
            self._mark_changed()

    def add_duration(self, delta: timedelta) -> None:
        """Add *delta* (negative to subtract) to the running total.

        Edge cases:
        - Unstarted: nothing happens.
        - Subtracting from a finished timer: nothing happens.
        - Subtracting past 0: stops at exactly 0 and unpauses.
        - Adding to a finished timer: restarts with *delta*.
        """
        if not self.is_started:
            logger.warning("timer hasn't started, not changing duration")
            return

        logger.debug("adding %s to timer", delta)
        with self.batch():
            self._refresh_cache()

            if delta < ZERO:
                if self.is_finished:
                    logger.warning("timer already finished, not subtracting")
                    return
                remaining = self.remaining()
                if remaining <= -delta:
                    self.resume()
                    self._total_duration = self._total_duration - remaining
                else:
                    self._total_duration = self._total_duration + delta
            elif delta > ZERO:
                if self.is_finished:
                    self.restart(delta)
                else:
                    self._total_duration = self._total_duration + round_to_millis(delta)

            self._mark_changed()
            self.recompute()

    def recompute(self, notify: bool = True) -> None:
        """Refresh ``time_remaining`` / ``projected_end`` from the clock.

        The first time remaining reaches 0 after a start, ``completed``
        is emitted (unless *notify* is false, in which case the run is
        just marked as already completed).  A timer restarted by a
        ``completed`` handler is not looked at again until the next
        call, so chained zero-length timers advance one per call.
        """
        was_finished = self.is_finished
        self._refresh_cache()
        self.tick.emit(self._time_remaining)

        if self.is_finished != was_finished:
            self._mark_changed()

        if self.is_finished and not self._completion_sent:
            self._completion_sent = True
            if notify:
                logger.info("timer finished")
                self.completed.emit()

    def load_state(
        self,
        total_duration: timedelta | None,
        start_time: datetime | None,
        last_pause_time: datetime | None,
        accumulated_paused: timedelta,
    ) -> None:
        """Overwrite the bookkeeping with stored values."""
        with self.batch():
            self._total_duration = total_duration
            self._start_time = start_time
            self._last_pause_time = last_pause_time
            self._accumulated_paused = accumulated_paused
            self._completion_sent = False
            self._refresh_cache()
            self._mark_changed()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _refresh_cache(self) -> None:
        self._time_remaining = self.remaining()
        self._projected_end = self.end_time()

    def _mark_changed(self) -> None:
        if self._batch_depth:
            self._dirty = True
        else:
            self.changed.emit()

    @contextmanager
    def batch(self):
        """Group mutations so observers see a single ``changed``."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
        if self._batch_depth == 0 and self._dirty:
            self._dirty = False
            self.changed.emit()
