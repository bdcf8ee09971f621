"""SQLAlchemy ORM models for countchain."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class KeyValue(Base):
    """One stored blob of text, addressed by key (e.g. ``"timers"``)."""

    __tablename__ = "key_values"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<KeyValue key={self.key} length={len(self.value or '')}>"
