"""Database package."""

from .db import (
    configure_engine,
    get_session,
    init_db,
    get_value,
    set_value,
    SqlKeyValueStore,
)
from .models import KeyValue

__all__ = [
    "configure_engine",
    "get_session",
    "init_db",
    "get_value",
    "set_value",
    "SqlKeyValueStore",
    "KeyValue",
]
