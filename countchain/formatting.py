"""Human-readable renderings of durations."""

from __future__ import annotations

from datetime import timedelta

from .interpreter.units import to_millis


def _split(millis: int) -> tuple[int, int, int, int, int]:
    seconds, ms = divmod(millis, 1000)
    minutes, s = divmod(seconds, 60)
    hours, m = divmod(minutes, 60)
    d, h = divmod(hours, 24)
    return d, h, m, s, ms


def format_clock(duration: timedelta) -> str:
    """Countdown display: ``"5:00"``, ``"1:02:03"``, ``"2:00:00:00"``.

    Partial seconds count as whole ones before zero and are dropped
    after it, so a fresh 5 minute timer reads ``5:00`` until a full
    second passes and overtime reads ``-0:01`` only after a full one.
    """
    millis = to_millis(duration)
    sign = "-" if millis <= -1000 else ""
    if millis >= 0:
        whole = -(-millis // 1000)
    else:
        whole = -millis // 1000
    d, h, m, s, _ = _split(whole * 1000)

    if d:
        return f"{sign}{d}:{h:02d}:{m:02d}:{s:02d}"
    if h:
        return f"{sign}{h}:{m:02d}:{s:02d}"
    return f"{sign}{m}:{s:02d}"


def format_units(duration: timedelta) -> str:
    """Compact unit form: ``"1h 2m 3s"``, ``"250ms"``, ``"0s"``."""
    millis = to_millis(duration)
    if millis == 0:
        return "0s"
    sign = "-" if millis < 0 else ""
    parts = [
        f"{value}{suffix}"
        for value, suffix in zip(_split(abs(millis)), ("d", "h", "m", "s", "ms"))
        if value
    ]
    return sign + " ".join(parts)
