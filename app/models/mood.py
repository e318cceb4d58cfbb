"""
Mood Model
==========

SQLAlchemy model for daily mood ratings.
"""

from datetime import datetime
import uuid

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, SmallInteger
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin

MIN_MOOD_RATING = 1
MAX_MOOD_RATING = 5


class Mood(Base, TimestampMixin):
    """
    A self-reported mood rating (1-5).

    One row per user per day is kept by the service layer, not by a
    database constraint.
    """

    __tablename__ = "moods"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    mood_rating: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
    )
    mood_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            f"mood_rating BETWEEN {MIN_MOOD_RATING} AND {MAX_MOOD_RATING}",
            name="ck_moods_rating_range",
        ),
        Index("ix_moods_user_mood_at", "user_id", "mood_at"),
    )

    def __repr__(self) -> str:
        return f"<Mood(id={self.id}, rating={self.mood_rating}, at={self.mood_at})>"
