"""
Goal Service
============

Goal CRUD plus the rules deciding which goals show up on a given day.

Goal targets come in three shapes:

- ``YYYY-MM-DD``: a due date; shown on that day, overdue afterwards
- ``Indefinite``: an ongoing goal, shown every day
- anything else: legacy free-text frequency; only text containing
  ``daily`` is shown on the day view
"""

import logging
from datetime import date, datetime
from typing import Iterable, Optional
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ErrorCodes, NotFoundError, ValidationError
from app.models.goal import INDEFINITE_TARGET, Goal, GoalProgress
from app.utils.helpers import utc_now
from app.utils.validators import is_iso_date, require_text

logger = logging.getLogger(__name__)

GOAL_FILTERS = ("daily", "weekly", "monthly", "all")


# =============================================================================
# Day rules
# =============================================================================

def target_date(target: str) -> Optional[date]:
    """The due date of a dated target, else None."""
    if not is_iso_date(target):
        return None
    try:
        return date.fromisoformat(target)
    except ValueError:
        return None


def is_due_on(goal: Goal, day: date) -> bool:
    """Whether ``goal`` belongs on the day view for ``day``."""
    target = goal.target
    if target == INDEFINITE_TARGET:
        return True
    if is_iso_date(target):
        return target == day.isoformat()
    return "daily" in target.lower()


def is_overdue(goal: Goal, today: date) -> bool:
    due = target_date(goal.target)
    return not goal.is_completed and due is not None and due < today


def categorize_goals(goals: Iterable[Goal], today: date) -> dict[str, list[Goal]]:
    """
    Split goals into ``active``, ``overdue`` and ``completed`` groups,
    preserving input order.
    """
    groups: dict[str, list[Goal]] = {"active": [], "overdue": [], "completed": []}
    for goal in goals:
        if goal.is_completed:
            groups["completed"].append(goal)
        elif is_overdue(goal, today):
            groups["overdue"].append(goal)
        else:
            groups["active"].append(goal)
    return groups


def goal_status_label(goal: Goal, today: date) -> str:
    """Short human label for a goal's target."""
    if goal.target == INDEFINITE_TARGET:
        return "Ongoing Goal"

    due = target_date(goal.target)
    if due is None:
        return goal.target
    if due == today:
        return "Due Today"
    if due < today:
        return "Overdue"
    return f"Due {due.strftime('%b')} {due.day}, {due.year}"


def validate_progress(progress: Optional[str]) -> Optional[str]:
    if progress is None:
        return None
    allowed = [p.value for p in GoalProgress]
    if progress not in allowed:
        raise ValidationError(
            message=f"Progress must be one of: {', '.join(allowed)}",
            field="progress",
            code=ErrorCodes.GOAL_INVALID_DATA,
        )
    return progress


# =============================================================================
# Service
# =============================================================================

class GoalService:
    """Service for goal operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_goal(self, goal_id: uuid.UUID, user_id: uuid.UUID) -> Goal:
        """Get a goal by ID ensuring it belongs to user."""
        stmt = select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
        result = await self.db.execute(stmt)
        goal = result.scalar_one_or_none()
        if goal is None:
            raise NotFoundError(code=ErrorCodes.GOAL_NOT_FOUND, message="Goal not found")
        return goal

    async def create_goal(
        self,
        user_id: uuid.UUID,
        name: Optional[str],
        target: Optional[str],
    ) -> Goal:
        goal = Goal(
            user_id=user_id,
            name=require_text(name, "Goal name is required", "name", ErrorCodes.GOAL_INVALID_DATA),
            target=require_text(target, "Frequency is required", "target", ErrorCodes.GOAL_INVALID_DATA),
            progress=GoalProgress.NOT_STARTED.value,
        )
        self.db.add(goal)
        await self.db.flush()
        logger.info("Created goal %s for user %s", goal.id, user_id)
        return goal

    async def update_goal(
        self,
        goal_id: uuid.UUID,
        user_id: uuid.UUID,
        name: Optional[str],
        target: Optional[str],
        progress: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Goal:
        clean_name = require_text(name, "Goal name is required", "name", ErrorCodes.GOAL_INVALID_DATA)
        clean_target = require_text(target, "Frequency is required", "target", ErrorCodes.GOAL_INVALID_DATA)
        progress = validate_progress(progress)

        goal = await self.get_goal(goal_id, user_id)
        goal.name = clean_name
        goal.target = clean_target
        if progress is not None:
            goal.progress = progress
        goal.updated_at = now or utc_now()

        await self.db.flush()
        return goal

    async def complete_goal(
        self,
        goal_id: uuid.UUID,
        user_id: uuid.UUID,
        now: Optional[datetime] = None,
    ) -> Goal:
        """Mark a goal completed, removing it from the active lists."""
        goal = await self.get_goal(goal_id, user_id)
        goal.progress = GoalProgress.COMPLETED.value
        goal.updated_at = now or utc_now()
        await self.db.flush()
        logger.info("Completed goal %s for user %s", goal_id, user_id)
        return goal

    async def delete_goal(self, goal_id: uuid.UUID, user_id: uuid.UUID) -> None:
        stmt = delete(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
        result = await self.db.execute(stmt)
        if not result.rowcount:
            raise NotFoundError(code=ErrorCodes.GOAL_NOT_FOUND, message="Goal not found")

    async def get_goals(
        self,
        user_id: uuid.UUID,
        frequency: Optional[str] = None,
    ) -> list[Goal]:
        """
        The user's goals, most recently updated first.

        A frequency other than ``all`` keeps goals whose target contains
        it, case-insensitively.
        """
        stmt = select(Goal).where(Goal.user_id == user_id)
        if frequency and frequency != "all":
            stmt = stmt.where(Goal.target.ilike(f"%{frequency}%"))
        stmt = stmt.order_by(Goal.updated_at.desc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_goals_for_day(self, user_id: uuid.UUID, day: date) -> list[Goal]:
        goals = await self.get_goals(user_id)
        return [goal for goal in goals if is_due_on(goal, day)]

    async def count(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(Goal).where(Goal.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar() or 0
