"""Console runner: python -m countchain "25m + 5m" [--title T] [--restore]."""

from __future__ import annotations

import argparse
import logging
import signal
import sys

from PyQt6.QtCore import QCoreApplication, QTimer

from .database import SqlKeyValueStore, configure_engine, init_db
from .formatting import format_clock
from .interpreter import InterpretError
from .settings import load_settings
from .timer import MultiTimer, RecomputeDriver, TimerList, TimerStore

logger = logging.getLogger("countchain")

DISPLAY_INTERVAL_MS = 1000


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="countchain",
        description="Run a chain of countdowns, e.g. \"(25m + 5m) * 4\"",
    )
    parser.add_argument("expression", nargs="?", help="Durations to count down")
    parser.add_argument("-t", "--title", default="", help="Label for the timer")
    parser.add_argument(
        "--restore", action="store_true", help="Continue the timers saved last time"
    )
    return parser


def label(multi: MultiTimer) -> str:
    return multi.title or multi.input_text or f"timer {multi.id}"


def describe(multi: MultiTimer) -> str:
    timer = multi.current
    if not timer.is_started:
        return f"{label(multi)}: not started"

    line = f"{label(multi)}: {format_clock(timer.time_remaining)}"
    if timer.is_paused:
        line += " (paused)"
    elif not timer.is_finished and timer.projected_end is not None:
        line += f" (ends {timer.projected_end.astimezone():%H:%M})"
    upcoming = multi.peek()
    if upcoming is not None:
        line += f"  up next: {upcoming}"
    return line


def announce_finish(multi: MultiTimer) -> None:
    """Ring the terminal bell each time a link of *multi* reaches 0."""
    multi.current.completed.connect(
        lambda: print(f"\a{label(multi)}: time is up", flush=True)
    )


def is_counting(multi: MultiTimer) -> bool:
    """Still running down, or finished with more literals queued."""
    timer = multi.current
    if not timer.is_running:
        return False
    return not timer.is_finished or multi.peek() is not None


def run(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.expression is None and not args.restore:
        parser.error("give an expression to run, or --restore")

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.database_url:
        configure_engine(settings.database_url)
    init_db()

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("countchain")

    store = TimerStore(SqlKeyValueStore(), settings.storage_key)
    timer_list = store.load() if args.restore else TimerList()

    if args.expression is not None:
        multi = timer_list[0] if timer_list.is_initial else timer_list.add()
        multi.input_text = args.expression
        multi.title = args.title
        try:
            multi.start()
        except InterpretError as exc:
            print(f"countchain: {args.expression!r}: {exc}", file=sys.stderr)
            return 2

    for multi in timer_list:
        announce_finish(multi)
    store.autosave(timer_list)
    store.save(timer_list)
    RecomputeDriver(
        timer_list,
        app,
        running_interval_ms=settings.running_interval_ms,
        paused_interval_ms=settings.paused_interval_ms,
    )

    def show() -> None:
        timer_list.recompute()
        for multi in timer_list:
            print(describe(multi), flush=True)
        if not any(is_counting(multi) for multi in timer_list):
            logger.info("nothing left to count down")
            app.quit()

    display = QTimer()
    display.setInterval(DISPLAY_INTERVAL_MS)
    display.timeout.connect(show)
    display.start()
    signal.signal(signal.SIGINT, lambda *_: app.quit())

    show()
    status = app.exec()
    store.save(timer_list)
    return status


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
