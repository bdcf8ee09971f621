"""Shared pytest fixtures for countchain tests."""

import os
import sys
from datetime import datetime, timezone

import pytest

# Run Qt headless (no display in CI/test environments).
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from countchain.database.db import configure_engine, init_db
from countchain.timer import MultiTimer, Timer, TimerList

from helpers import FakeClock

T0 = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    """A hand-driven clock starting at T0."""
    return FakeClock(T0)


@pytest.fixture
def timer(qapp, clock):
    """Fresh unstarted Timer on the fake clock."""
    return Timer(clock=clock)


@pytest.fixture
def make_multi(qapp, clock):
    """Factory for MultiTimers on the fake clock."""
    def _make(input_text="", title=""):
        return MultiTimer(input_text=input_text, title=title, clock=clock)
    return _make


@pytest.fixture
def timer_list(qapp, clock):
    """Fresh TimerList (one blank timer) on the fake clock."""
    return TimerList(clock=clock)
