"""Base model class and common mixins for SQLAlchemy models.

This module provides the declarative base shared by the combatant, battle and
restriction tables plus the timestamp mixins they use.
"""

from datetime import UTC, datetime
from typing import ClassVar

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Provides type_annotation_map for automatic type inference from Python types.
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """Mixin for mutable rows: created_at on insert, updated_at on every update."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: utc_now(),
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: utc_now(),
        server_default=func.now(),
        onupdate=lambda: utc_now(),
    )


class TimestampCreatedMixin:
    """Mixin for append-only rows such as battle records."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: utc_now(),
        server_default=func.now(),
    )


def utc_now() -> datetime:
    """Get current UTC time with timezone awareness.

    Returns:
        datetime: Current time in UTC with timezone info
    """
    return datetime.now(UTC)
