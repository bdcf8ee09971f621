"""Saving and restoring timers.

Each :class:`MultiTimer` becomes a flat record::

    {
        "duration_ms": 300000,            # absent if never started
        "start_unix_ms": 1700000000000,   # absent if never started
        "last_pause_unix_ms": ...,        # absent unless paused
        "acc_pause_ms": 0,
        "input_text": "5m+10s",
        "title": "",
        "consumed_count": 1,
    }

Restoring re-interprets ``input_text`` and replays ``consumed_count``
advances so the sequence position is exact, then overwrites the
timer's bookkeeping with the stored instants.  An entry that can't be
replayed faithfully is dropped; the rest of the list still loads.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Protocol

from ..interpreter import InterpretError
from ..interpreter.units import from_millis, to_millis
from .engine import Clock
from .multi import MultiTimer
from .timer_list import TimerList

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
DEFAULT_STORAGE_KEY = "timers"


class InvalidRecord(ValueError):
    """A stored entry that can't be turned back into a timer."""


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


# ── instants ──────────────────────────────────────────────────────────────


def to_unix_millis(instant: datetime) -> int:
    return to_millis(instant - EPOCH)


def from_unix_millis(millis: int) -> datetime:
    return EPOCH + from_millis(millis)


# ── single records ────────────────────────────────────────────────────────


def snapshot(multi: MultiTimer) -> dict[str, Any]:
    timer = multi.current
    record: dict[str, Any] = {}
    if timer.total_duration is not None:
        record["duration_ms"] = to_millis(timer.total_duration)
    if timer.start_time is not None:
        record["start_unix_ms"] = to_unix_millis(timer.start_time)
    if timer.last_pause_time is not None:
        record["last_pause_unix_ms"] = to_unix_millis(timer.last_pause_time)
    record["acc_pause_ms"] = to_millis(timer.accumulated_paused)
    record["input_text"] = multi.input_text
    record["title"] = multi.title
    record["consumed_count"] = multi.consumed_count
    return record


def _optional_int(record: dict, key: str) -> int | None:
    value = record.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRecord(f"{key} must be an integer, got {value!r}")
    return value


def _text(record: dict, key: str) -> str:
    value = record.get(key, "")
    if not isinstance(value, str):
        raise InvalidRecord(f"{key} must be a string, got {value!r}")
    return value


def decode(record: Any, clock: Clock | None = None) -> MultiTimer:
    """Rebuild a timer from *record*.  Raises :class:`InvalidRecord`."""
    if not isinstance(record, dict):
        raise InvalidRecord(f"expected an object, got {type(record).__name__}")

    duration_ms = _optional_int(record, "duration_ms")
    start_ms = _optional_int(record, "start_unix_ms")
    pause_ms = _optional_int(record, "last_pause_unix_ms")
    acc_pause_ms = _optional_int(record, "acc_pause_ms") or 0
    consumed = _optional_int(record, "consumed_count") or 0
    input_text = _text(record, "input_text")
    title = _text(record, "title")

    if start_ms is not None and duration_ms is None:
        raise InvalidRecord("started without a duration")
    if pause_ms is not None and start_ms is None:
        raise InvalidRecord("paused but never started")
    if consumed < 0:
        raise InvalidRecord(f"negative consumed_count {consumed}")

    multi = MultiTimer(input_text=input_text, title=title, clock=clock)
    try:
        if consumed > 0:
            multi.start()
            for _ in range(consumed - 1):
                if multi.peek() is None:
                    break
                multi.next()
    except InterpretError as exc:
        raise InvalidRecord(f"input {input_text!r} no longer parses: {exc}") from exc
    if multi.consumed_count != consumed:
        raise InvalidRecord(
            f"replay reached {multi.consumed_count} of {consumed} literals"
        )

    try:
        multi.current.load_state(
            from_millis(duration_ms) if duration_ms is not None else None,
            from_unix_millis(start_ms) if start_ms is not None else None,
            from_unix_millis(pause_ms) if pause_ms is not None else None,
            from_millis(acc_pause_ms),
        )
        # already-expired entries must not chain forward on load
        multi.recompute(notify=False)
    except OverflowError as exc:
        raise InvalidRecord(f"stored times out of range: {exc}") from exc
    return multi


def restore(record: Any, clock: Clock | None = None) -> MultiTimer | None:
    """Like :func:`decode`, but logs and returns ``None`` for bad records."""
    try:
        return decode(record, clock)
    except InvalidRecord as exc:
        logger.warning("discarding stored timer: %s", exc)
        return None


# ── lists ─────────────────────────────────────────────────────────────────


def dump_timers(timers: Iterable[MultiTimer]) -> str:
    return json.dumps([snapshot(t) for t in timers])


def load_timers(text: str, clock: Clock | None = None) -> list[MultiTimer] | None:
    """Decode a JSON array of records.

    Returns ``None`` when *text* isn't a JSON array at all; otherwise
    every entry that restores cleanly, in order.
    """
    try:
        records = json.loads(text)
    except (TypeError, ValueError) as exc:
        logger.warning("stored timers are not valid JSON: %s", exc)
        return None
    if not isinstance(records, list):
        logger.warning("stored timers are not a list")
        return None

    timers = []
    for record in records:
        multi = restore(record, clock)
        if multi is not None:
            timers.append(multi)
    return timers


# ── storage binding ───────────────────────────────────────────────────────


class TimerStore:
    """Loads and saves a :class:`TimerList` through a key-value store.

    Storage problems are treated as "nothing stored": they are logged
    and never raised to the caller.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self._tracked: TimerList | None = None

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> TimerList:
        """Restore the stored list, or a blank one."""
        try:
            text = self._storage.get(self._key)
        except Exception:
            logger.warning("could not read %r from storage", self._key, exc_info=True)
            text = None

        timers = load_timers(text, self._clock) if text is not None else None
        logger.info("restored %d timer(s)", len(timers or ()))
        return TimerList(clock=self._clock, timers=timers or ())

    def save(self, timer_list: TimerList) -> None:
        try:
            self._storage.set(self._key, dump_timers(timer_list))
        except Exception:
            logger.warning("could not write %r to storage", self._key, exc_info=True)

    def autosave(self, timer_list: TimerList) -> None:
        """Save *timer_list* after every change it reports."""
        if self._tracked is not None:
            self._tracked.changed.disconnect(self._save_tracked)
            self._tracked.structure_changed.disconnect(self._save_tracked)
        self._tracked = timer_list
        timer_list.changed.connect(self._save_tracked)
        timer_list.structure_changed.connect(self._save_tracked)

    def _save_tracked(self) -> None:
        if self._tracked is not None:
            self.save(self._tracked)
