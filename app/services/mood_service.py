"""
Mood Service
============

Mood logging and retrieval. A user keeps at most one mood per day:
saving again on the same day overwrites the earlier rating.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ErrorCodes, ValidationError
from app.models.mood import MAX_MOOD_RATING, MIN_MOOD_RATING, Mood
from app.utils.helpers import day_bounds, local_today, utc_now

logger = logging.getLogger(__name__)

MOOD_HISTORY_LIMIT = 30


def validate_mood_rating(value: Any) -> int:
    """
    Coerce a submitted rating to an int in 1..5.

    Raises:
        ValidationError: If the value is missing, non-numeric, or out of range
    """
    try:
        rating = int(str(value).strip())
    except (TypeError, ValueError):
        rating = 0

    if rating < MIN_MOOD_RATING or rating > MAX_MOOD_RATING:
        raise ValidationError(
            message="Invalid mood rating. Must be between 1 and 5.",
            field="mood_rating",
            code=ErrorCodes.MOOD_INVALID_RATING,
        )
    return rating


class MoodService:
    """Service for mood operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_mood_for_day(
        self,
        user_id: uuid.UUID,
        day: date,
    ) -> Optional[Mood]:
        """Most recent mood recorded within ``day``."""
        start, end = day_bounds(day)
        stmt = (
            select(Mood)
            .where(
                Mood.user_id == user_id,
                Mood.mood_at >= start,
                Mood.mood_at < end,
            )
            .order_by(Mood.mood_at.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_today_mood(
        self,
        user_id: uuid.UUID,
        now: Optional[datetime] = None,
    ) -> Optional[Mood]:
        return await self.get_mood_for_day(user_id, local_today(now))

    async def save_mood(
        self,
        user_id: uuid.UUID,
        rating: int,
        now: Optional[datetime] = None,
    ) -> tuple[Mood, bool]:
        """
        Record today's mood, updating today's row when one exists.

        Returns:
            The saved mood and whether a new row was inserted
        """
        now = now or utc_now()
        existing = await self.get_today_mood(user_id, now)

        if existing is not None:
            existing.mood_rating = rating
            existing.mood_at = now
            existing.updated_at = now
            await self.db.flush()
            logger.info("Updated mood %s for user %s", existing.id, user_id)
            return existing, False

        mood = Mood(
            user_id=user_id,
            mood_rating=rating,
            mood_at=now,
        )
        self.db.add(mood)
        await self.db.flush()
        logger.info("Recorded mood for user %s", user_id)
        return mood, True

    async def get_history(
        self,
        user_id: uuid.UUID,
        limit: int = MOOD_HISTORY_LIMIT,
    ) -> list[Mood]:
        """Newest moods first."""
        stmt = (
            select(Mood)
            .where(Mood.user_id == user_id)
            .order_by(Mood.mood_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_latest(self, user_id: uuid.UUID) -> Optional[Mood]:
        history = await self.get_history(user_id, limit=1)
        return history[0] if history else None

    async def get_moods_since(
        self,
        user_id: uuid.UUID,
        since: datetime,
    ) -> list[Mood]:
        """Moods at or after ``since``, oldest first."""
        stmt = (
            select(Mood)
            .where(
                Mood.user_id == user_id,
                Mood.mood_at >= since,
            )
            .order_by(Mood.mood_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self, user_id: uuid.UUID) -> list[Mood]:
        result = await self.db.execute(select(Mood).where(Mood.user_id == user_id))
        return list(result.scalars().all())

    async def count(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(Mood).where(Mood.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar() or 0
