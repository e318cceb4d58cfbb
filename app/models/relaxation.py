"""
Relaxation Suggestion Model
===========================

SQLAlchemy model for activities a user picked from their suggestions.
"""

from typing import Optional
import uuid

from sqlalchemy import ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, CreatedAtMixin


class RelaxationSuggestion(Base, CreatedAtMixin):
    """
    A saved relaxation activity.

    ``activity_suggestion`` is a JSON snapshot of the catalog entry at
    the time it was chosen.
    """

    __tablename__ = "relaxation_suggestions"

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
    mood_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("moods.id", ondelete="SET NULL"),
        nullable=True,
    )
    activity_suggestion: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<RelaxationSuggestion(id={self.id}, mood_id={self.mood_id})>"
