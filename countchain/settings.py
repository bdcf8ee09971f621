"""Application settings with JSON persistence.

Settings are stored at:
    ~/.config/countchain/settings.json

Usage::

    settings = load_settings()
    settings.running_interval_ms = 100
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

# Same directory as the database in db.py
APP_SUPPORT_DIR = Path.home() / ".config" / "countchain"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── recompute driver ──────────────────────────────────────────────
    running_interval_ms: int = 200
    paused_interval_ms: int = 1000

    # ── storage ───────────────────────────────────────────────────────
    storage_key: str = "timers"
    database_url: str | None = None        # None → SQLite in APP_SUPPORT_DIR

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "WARNING"


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError):
        logger.warning("ignoring unreadable settings at %s", SETTINGS_PATH, exc_info=True)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
