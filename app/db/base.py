"""
Database Base Model
===================

Provides the base class for all SQLAlchemy models.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Base class for all database models.

    Tables mirror the hosted Supabase schema.
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }

    def to_dict(self) -> dict[str, Any]:
        """Column values as a JSON-friendly dict (the shape PostgREST returns)."""
        data: dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if hasattr(value, "isoformat"):
                value = value.isoformat()
            elif value is not None and not isinstance(value, (str, int, float, bool)):
                value = str(value)
            data[column.key] = value
        return data


class CreatedAtMixin:
    """
    Mixin that adds a server-populated created_at timestamp.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class UpdatedAtMixin:
    """
    Mixin that adds an updated_at timestamp, written explicitly on update.
    """

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=True,
    )


class TimestampMixin(CreatedAtMixin, UpdatedAtMixin):
    """
    Mixin that adds created_at and updated_at timestamps.
    """
