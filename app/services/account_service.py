"""
Account Service
===============

Profile rows in the public ``users`` table, account statistics, and the
personal data export.
"""

import logging
from datetime import datetime
from typing import Any, Optional
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.services.goal_service import GoalService
from app.services.journal_service import JournalService
from app.services.mood_service import MoodService
from app.services.physical_health_service import PhysicalHealthService, serialize_log
from app.utils.helpers import utc_now
from app.utils.validators import clean_text

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("full_name", "username", "phone_number")
DEFAULT_USERNAME = "User"


class AccountService:
    """Service for profile and account-level operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def email_exists(self, email: str) -> bool:
        return await self.get_user_by_email(email) is not None

    async def get_display_names(self, user_id: uuid.UUID) -> dict[str, Optional[str]]:
        """
        Username and full name for greetings.

        Falls back to the default name when the row is missing or the
        lookup fails.
        """
        try:
            profile = await self.get_profile(user_id)
        except SQLAlchemyError as e:
            logger.error("Error fetching user profile for %s: %s", user_id, e)
            return {"username": DEFAULT_USERNAME, "full_name": None}

        if profile is None:
            return {"username": DEFAULT_USERNAME, "full_name": None}
        return {
            "username": profile.username or DEFAULT_USERNAME,
            "full_name": profile.full_name or None,
        }

    async def ensure_profile(
        self,
        user_id: uuid.UUID,
        email: Optional[str],
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Create the profile row on first sign-in, seeded from the
        sign-up metadata. Existing rows are left untouched.
        """
        metadata = metadata or {}
        values = {
            "id": user_id,
            "email": email,
            **{name: clean_text(metadata.get(name)) for name in PROFILE_FIELDS},
        }
        stmt = pg_insert(User).values(**values).on_conflict_do_nothing(index_elements=[User.id])
        await self.db.execute(stmt)

    async def update_profile(
        self,
        user_id: uuid.UUID,
        email: Optional[str],
        full_name: Optional[str],
        username: Optional[str],
        phone_number: Optional[str],
        now: Optional[datetime] = None,
    ) -> User:
        """Overwrite the editable profile fields, creating the row if needed."""
        profile = await self.get_profile(user_id)
        if profile is None:
            profile = User(id=user_id, email=email)
            self.db.add(profile)

        profile.full_name = clean_text(full_name)
        profile.username = clean_text(username)
        profile.phone_number = clean_text(phone_number)
        profile.updated_at = now or utc_now()

        await self.db.flush()
        return profile

    async def delete_profile(self, user_id: uuid.UUID) -> None:
        await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.flush()

    async def get_account_stats(self, user_id: uuid.UUID) -> dict[str, int]:
        return {
            "goalsCount": await GoalService(self.db).count(user_id),
            "journalsCount": await JournalService(self.db).count(user_id),
            "moodsCount": await MoodService(self.db).count(user_id),
        }

    async def export_user_data(
        self,
        user_id: uuid.UUID,
        now: Optional[datetime] = None,
    ) -> dict[str, Any]:
        """Everything stored for the user, as plain JSON-ready dicts."""
        profile = await self.get_profile(user_id)
        goals = await GoalService(self.db).get_goals(user_id)
        journals = await JournalService(self.db).get_entries(user_id)
        moods = await MoodService(self.db).list_all(user_id)
        health_logs = await PhysicalHealthService(self.db).list_all(user_id)

        return {
            "userData": profile.to_dict() if profile else None,
            "goals": [goal.to_dict() for goal in goals],
            "journals": [entry.to_dict() for entry in journals],
            "moods": [mood.to_dict() for mood in moods],
            "physicalHealth": [serialize_log(log) for log in health_logs],
            "exportedAt": (now or utc_now()).isoformat(),
        }
