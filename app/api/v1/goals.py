"""
Goals API Endpoints
===================

Goal CRUD, the filtered list, the day view, and the grouped view.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Form, Query, status

from app.core.errors import ErrorCodes, ValidationError
from app.dependencies import CurrentUser, DBSession
from app.models.goal import Goal
from app.schemas.common import BaseResponse, ErrorResponse
from app.schemas.tracking import GoalGroups, GoalOut
from app.services.goal_service import (
    GOAL_FILTERS,
    GoalService,
    categorize_goals,
    goal_status_label,
)
from app.utils.helpers import local_today
from app.utils.validators import parse_uuid

logger = logging.getLogger(__name__)

router = APIRouter()


def goal_to_out(goal: Goal, today) -> GoalOut:
    out = GoalOut.model_validate(goal)
    out.status_label = goal_status_label(goal, today)
    return out


def _goal_id(goal_id: str):
    return parse_uuid(goal_id, "Goal ID is required", "id", ErrorCodes.GOAL_INVALID_DATA)


@router.get("", response_model=BaseResponse[list[GoalOut]])
async def get_goals(
    current_user: CurrentUser,
    db: DBSession,
    filter: str = Query("all", description="daily, weekly, monthly or all"),
):
    """The user's goals, most recently updated first."""
    frequency = filter.lower()
    if frequency not in GOAL_FILTERS:
        raise ValidationError(
            message=f"Filter must be one of: {', '.join(GOAL_FILTERS)}",
            field="filter",
            code=ErrorCodes.GOAL_INVALID_DATA,
        )

    goals = await GoalService(db).get_goals(current_user.id, frequency)
    today = local_today()
    return BaseResponse(data=[goal_to_out(g, today) for g in goals])


@router.get("/today", response_model=BaseResponse[list[GoalOut]])
async def get_goals_for_today(current_user: CurrentUser, db: DBSession):
    """Goals that belong on today's view."""
    today = local_today()
    goals = await GoalService(db).get_goals_for_day(current_user.id, today)
    return BaseResponse(data=[goal_to_out(g, today) for g in goals])


@router.get("/grouped", response_model=BaseResponse[GoalGroups])
async def get_grouped_goals(current_user: CurrentUser, db: DBSession):
    today = local_today()
    goals = await GoalService(db).get_goals(current_user.id)
    groups = categorize_goals(goals, today)
    return BaseResponse(
        data=GoalGroups(**{
            name: [goal_to_out(g, today) for g in members]
            for name, members in groups.items()
        })
    )


@router.post(
    "",
    response_model=BaseResponse[GoalOut],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Missing name or target"}},
)
async def create_goal(
    current_user: CurrentUser,
    db: DBSession,
    name: Annotated[Optional[str], Form()] = None,
    target: Annotated[Optional[str], Form()] = None,
):
    goal = await GoalService(db).create_goal(current_user.id, name, target)
    return BaseResponse(data=goal_to_out(goal, local_today()), message="Goal created")


@router.put(
    "/{goal_id}",
    response_model=BaseResponse[GoalOut],
    responses={404: {"model": ErrorResponse, "description": "Goal not found"}},
)
async def update_goal(
    goal_id: str,
    current_user: CurrentUser,
    db: DBSession,
    name: Annotated[Optional[str], Form()] = None,
    target: Annotated[Optional[str], Form()] = None,
    progress: Annotated[Optional[str], Form()] = None,
):
    goal = await GoalService(db).update_goal(
        _goal_id(goal_id),
        current_user.id,
        name,
        target,
        progress=progress,
    )
    return BaseResponse(data=goal_to_out(goal, local_today()), message="Goal updated")


@router.post(
    "/{goal_id}/complete",
    response_model=BaseResponse[GoalOut],
    responses={404: {"model": ErrorResponse, "description": "Goal not found"}},
)
async def complete_goal(goal_id: str, current_user: CurrentUser, db: DBSession):
    """Mark a goal completed. It stays in the completed group."""
    goal = await GoalService(db).complete_goal(_goal_id(goal_id), current_user.id)
    return BaseResponse(data=goal_to_out(goal, local_today()), message="Goal completed")


@router.delete(
    "/{goal_id}",
    response_model=BaseResponse[None],
    responses={404: {"model": ErrorResponse, "description": "Goal not found"}},
)
async def delete_goal(goal_id: str, current_user: CurrentUser, db: DBSession):
    await GoalService(db).delete_goal(_goal_id(goal_id), current_user.id)
    logger.info("Deleted goal %s for user %s", goal_id, current_user.id)
    return BaseResponse(message="Goal deleted")
