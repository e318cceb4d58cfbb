"""
Journal Service
===============

Business logic for journal entries.
"""

import logging
from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ErrorCodes, NotFoundError
from app.models.journal import JournalEntry
from app.utils.helpers import local_today, utc_now
from app.utils.validators import clean_text, require_text

logger = logging.getLogger(__name__)


class JournalService:
    """Service for journal operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_entry_by_id(
        self,
        entry_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> JournalEntry:
        """Get journal entry by ID ensuring it belongs to user."""
        stmt = select(JournalEntry).where(
            JournalEntry.id == entry_id,
            JournalEntry.user_id == user_id,
        )
        result = await self.db.execute(stmt)
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError(
                code=ErrorCodes.JOURNAL_NOT_FOUND,
                message="Journal entry not found",
            )
        return entry

    async def get_entries(self, user_id: uuid.UUID) -> list[JournalEntry]:
        """All of the user's entries, newest day first."""
        stmt = (
            select(JournalEntry)
            .where(JournalEntry.user_id == user_id)
            .order_by(JournalEntry.date_created.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_entry(
        self,
        user_id: uuid.UUID,
        title: Optional[str],
        content: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> JournalEntry:
        """Create a journal entry dated today."""
        now = now or utc_now()
        entry = JournalEntry(
            user_id=user_id,
            title=require_text(title, "Title is required", "title", ErrorCodes.JOURNAL_INVALID_DATA),
            content=clean_text(content),
            date_created=local_today(now),
            updated_at=now,
        )
        self.db.add(entry)
        await self.db.flush()
        logger.info("Created journal entry %s for user %s", entry.id, user_id)
        return entry

    async def update_entry(
        self,
        entry_id: uuid.UUID,
        user_id: uuid.UUID,
        title: Optional[str],
        content: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> JournalEntry:
        """Update title and content of an existing entry."""
        clean_title = require_text(title, "Title is required", "title", ErrorCodes.JOURNAL_INVALID_DATA)

        entry = await self.get_entry_by_id(entry_id, user_id)
        entry.title = clean_title
        entry.content = clean_text(content)
        entry.updated_at = now or utc_now()

        await self.db.flush()
        return entry

    async def delete_entry(self, entry_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Delete a journal entry."""
        stmt = delete(JournalEntry).where(
            JournalEntry.id == entry_id,
            JournalEntry.user_id == user_id,
        )
        result = await self.db.execute(stmt)
        if not result.rowcount:
            raise NotFoundError(
                code=ErrorCodes.JOURNAL_NOT_FOUND,
                message="Journal entry not found",
            )
        logger.info("Deleted journal entry %s for user %s", entry_id, user_id)

    async def count(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(JournalEntry).where(
            JournalEntry.user_id == user_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0
