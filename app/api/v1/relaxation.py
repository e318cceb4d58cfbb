"""
Relaxation API Endpoints
========================

Mood-matched activity suggestions and saving the ones the user picks.
"""

from fastapi import APIRouter, status

from app.dependencies import CurrentUser, DBSession
from app.schemas.common import BaseResponse, ErrorResponse
from app.schemas.wellbeing import (
    ActivityOut,
    ActivitySaveResult,
    ActivitySelection,
    RelaxationSuggestionsOut,
)
from app.services.relaxation_service import RELAXATION_ACTIVITIES, RelaxationService

router = APIRouter()


async def save_activities(db, user_id, activity_ids: list[str]) -> ActivitySaveResult:
    rows = await RelaxationService(db).save_selected_activities(user_id, activity_ids)
    count = len(rows)
    return ActivitySaveResult(
        count=count,
        message=f"Successfully saved {count} activity(ies)",
    )


@router.get("/activities", response_model=BaseResponse[list[ActivityOut]])
async def list_activities():
    """The full activity catalog."""
    return BaseResponse(data=[ActivityOut(**a.to_dict()) for a in RELAXATION_ACTIVITIES])


@router.get("/suggestions", response_model=BaseResponse[RelaxationSuggestionsOut])
async def get_suggestions(current_user: CurrentUser, db: DBSession):
    """Activities matching today's mood."""
    suggestions = await RelaxationService(db).get_suggestions(current_user.id)
    return BaseResponse(data=RelaxationSuggestionsOut(**suggestions))


@router.post(
    "/selections",
    response_model=BaseResponse[ActivitySaveResult],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Nothing valid selected"}},
)
async def save_selected_activities(
    selection: ActivitySelection,
    current_user: CurrentUser,
    db: DBSession,
):
    """
    Save the chosen activities against the most recent mood.

    Unknown ids are skipped.
    """
    result = await save_activities(db, current_user.id, selection.activity_ids)
    return BaseResponse(data=result, message=result.message)


@router.post(
    "/suggestions/{activity_id}",
    response_model=BaseResponse[ActivitySaveResult],
    status_code=status.HTTP_201_CREATED,
)
async def save_suggestion(activity_id: str, current_user: CurrentUser, db: DBSession):
    result = await save_activities(db, current_user.id, [activity_id])
    return BaseResponse(data=result, message=result.message)
