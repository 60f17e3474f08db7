"""SQLAlchemy ORM models."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class KeyValueModel(Base):
    """One durable string key -> string value pair.

    Hey future me - the metadata cache is stored as ONE row (the whole JSON map
    under a versioned key), so a flush is a single-row upsert. That's what makes
    flushes all-or-nothing: a crash mid-flush leaves the previous document intact.
    """

    __tablename__ = "key_value"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )
