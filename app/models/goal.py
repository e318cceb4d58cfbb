"""
Goal Model
==========

SQLAlchemy model for user goals.
"""

from enum import Enum
import uuid

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin

INDEFINITE_TARGET = "Indefinite"


class GoalProgress(str, Enum):
    """Goal progress values, stored as their display text."""
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class Goal(Base, TimestampMixin):
    """
    A user goal.

    ``target`` is a ``YYYY-MM-DD`` due date, the literal ``Indefinite``,
    or legacy free text such as ``daily``.
    """

    __tablename__ = "goal"

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
    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    target: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    progress: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=GoalProgress.NOT_STARTED.value,
    )

    @property
    def is_completed(self) -> bool:
        return self.progress == GoalProgress.COMPLETED.value

    def __repr__(self) -> str:
        return f"<Goal(id={self.id}, name={self.name!r}, target={self.target!r})>"
