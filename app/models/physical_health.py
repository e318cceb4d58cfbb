"""
Physical Health Model
=====================

SQLAlchemy model for daily physical-health logs.
"""

from typing import Optional
import uuid

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


class PhysicalHealth(Base, TimestampMixin):
    """
    A physical-health log.

    ``complaints`` holds a JSON-encoded string with ``weight``,
    ``sleepHours``, ``stepCounts`` and ``date`` keys.
    """

    __tablename__ = "physical_health"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    complaints: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    health_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<PhysicalHealth(id={self.id}, health_id={self.health_id})>"
