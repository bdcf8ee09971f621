"""Periodic recompute driver.

Timers never update themselves; something has to call ``recompute`` on
a schedule.  ``RecomputeDriver`` owns a ``QTimer`` and picks its
interval from what the list is doing:

    any timer running        → ``running_interval_ms`` (smooth display)
    only paused timers       → ``paused_interval_ms`` (end time drifts)
    nothing started          → stopped
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QTimer

from .timer_list import TimerList

logger = logging.getLogger(__name__)

RUNNING_INTERVAL_MS = 200
PAUSED_INTERVAL_MS = 1000


class RecomputeDriver(QObject):
    """Ticks a :class:`TimerList` while any of its timers need it."""

    def __init__(
        self,
        timer_list: TimerList,
        parent: QObject | None = None,
        *,
        running_interval_ms: int = RUNNING_INTERVAL_MS,
        paused_interval_ms: int = PAUSED_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._timer_list = timer_list
        self._running_interval_ms = running_interval_ms
        self._paused_interval_ms = paused_interval_ms

        self._qt_timer = QTimer(self)
        self._qt_timer.timeout.connect(self._on_tick)

        timer_list.changed.connect(self.update_interval)
        timer_list.structure_changed.connect(self.update_interval)
        self.update_interval()

    @property
    def timer_list(self) -> TimerList:
        return self._timer_list

    @property
    def is_active(self) -> bool:
        return self._qt_timer.isActive()

    @property
    def interval(self) -> int | None:
        """Current tick interval in ms, or ``None`` when stopped."""
        return self._qt_timer.interval() if self._qt_timer.isActive() else None

    def wanted_interval(self) -> int | None:
        if self._timer_list.any_running:
            return self._running_interval_ms
        if self._timer_list.any_paused:
            return self._paused_interval_ms
        return None

    def update_interval(self) -> None:
        """Start, stop or re-pace the ``QTimer`` to match the list."""
        wanted = self.wanted_interval()
        if wanted is None:
            if self._qt_timer.isActive():
                logger.debug("nothing started, stopping driver")
                self._qt_timer.stop()
            return
        if not self._qt_timer.isActive() or self._qt_timer.interval() != wanted:
            logger.debug("driver ticking every %d ms", wanted)
            self._qt_timer.start(wanted)

    def _on_tick(self) -> None:
        self._timer_list.recompute()
