"""SQLAlchemy declarative base with integer primary key mixin."""

from __future__ import annotations

from datetime import datetime, timezone
from sqlalchemy import Integer, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class IdMixin:
    """Mixin that provides an autoincrement integer primary key and created_at timestamp."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
    )


# Largest value an INTEGER column or bind parameter can carry (signed 64-bit)
MAX_INTEGER = 2**63 - 1
