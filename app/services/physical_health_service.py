"""
Physical Health Service
=======================

Daily weight / sleep / step logging. Like moods, one log is kept per
user per day; logging again on the same day replaces the measurements.
"""

import json
import logging
import math
from datetime import datetime, timedelta
from typing import Any, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ErrorCodes, ValidationError
from app.models.physical_health import PhysicalHealth
from app.utils.helpers import parse_json_text, today_bounds, utc_now
from app.utils.validators import clean_text

logger = logging.getLogger(__name__)

RECENT_DAYS = 7


def _parse_number(value: Optional[str], field: str, cast=float):
    cleaned = clean_text(value)
    if cleaned is None:
        return None
    try:
        number = cast(cleaned)
    except ValueError:
        number = None
    if number is None or not math.isfinite(number):
        raise ValidationError(
            message=f"{field} must be a number",
            field=field,
        )
    return number


def build_health_payload(
    weight: Optional[str],
    sleep_hours: Optional[str],
    step_counts: Optional[str],
    now: datetime,
) -> dict[str, Any]:
    """
    Build the measurements object stored in ``complaints``.

    Raises:
        ValidationError: If every field is blank or a value is not numeric
    """
    if not any(clean_text(v) for v in (weight, sleep_hours, step_counts)):
        raise ValidationError(
            message="Please fill in at least one field",
            code=ErrorCodes.HEALTH_EMPTY_ENTRY,
        )

    steps = _parse_number(step_counts, "step_counts", float)
    return {
        "weight": _parse_number(weight, "weight"),
        "sleepHours": _parse_number(sleep_hours, "sleep_hours"),
        "stepCounts": int(steps) if steps is not None else None,
        "date": now.isoformat(),
    }


def parse_complaints(raw: Optional[str]) -> dict[str, Any]:
    """Decode the stored measurements; malformed values decode to ``{}``."""
    return parse_json_text(raw)


def serialize_log(log: Optional[PhysicalHealth]) -> Optional[dict[str, Any]]:
    """Row dict with ``complaints`` decoded into an object."""
    if log is None:
        return None
    data = log.to_dict()
    data["complaints"] = parse_complaints(log.complaints)
    return data


class PhysicalHealthService:
    """Service for physical health logs."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_today(
        self,
        user_id: uuid.UUID,
        now: Optional[datetime] = None,
    ) -> Optional[PhysicalHealth]:
        start, end = today_bounds(now)
        stmt = (
            select(PhysicalHealth)
            .where(
                PhysicalHealth.user_id == user_id,
                PhysicalHealth.created_at >= start,
                PhysicalHealth.created_at < end,
            )
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def save(
        self,
        user_id: uuid.UUID,
        weight: Optional[str] = None,
        sleep_hours: Optional[str] = None,
        step_counts: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> tuple[PhysicalHealth, bool]:
        """
        Record today's measurements.

        Returns:
            The saved log and whether a new row was inserted
        """
        now = now or utc_now()
        payload = json.dumps(build_health_payload(weight, sleep_hours, step_counts, now))

        existing = await self.get_today(user_id, now)
        if existing is not None:
            existing.complaints = payload
            existing.updated_at = now
            await self.db.flush()
            return existing, False

        log = PhysicalHealth(
            user_id=user_id,
            complaints=payload,
            health_id=f"health_{int(now.timestamp() * 1000)}",
            created_at=now,
            updated_at=now,
        )
        self.db.add(log)
        await self.db.flush()
        logger.info("Recorded physical health log for user %s", user_id)
        return log, True

    async def get_recent(
        self,
        user_id: uuid.UUID,
        days: int = RECENT_DAYS,
        now: Optional[datetime] = None,
    ) -> list[PhysicalHealth]:
        """Logs from the last ``days`` days, newest first."""
        since = (now or utc_now()) - timedelta(days=days)
        stmt = (
            select(PhysicalHealth)
            .where(
                PhysicalHealth.user_id == user_id,
                PhysicalHealth.created_at >= since,
            )
            .order_by(PhysicalHealth.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_latest(self, user_id: uuid.UUID) -> Optional[PhysicalHealth]:
        stmt = (
            select(PhysicalHealth)
            .where(PhysicalHealth.user_id == user_id)
            .order_by(PhysicalHealth.updated_at.desc().nulls_last())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_all(self, user_id: uuid.UUID) -> list[PhysicalHealth]:
        result = await self.db.execute(
            select(PhysicalHealth).where(PhysicalHealth.user_id == user_id)
        )
        return list(result.scalars().all())
