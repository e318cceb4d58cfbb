"""
Mood API Endpoints
==================

Daily mood check-in and history.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Form, status
from fastapi.responses import JSONResponse

from app.dependencies import CurrentUser, DBSession
from app.schemas.common import BaseResponse, ErrorResponse
from app.schemas.tracking import MoodOut, MoodSaveResult
from app.services.mood_service import MoodService, validate_mood_rating

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=BaseResponse[MoodSaveResult],
    responses={400: {"model": ErrorResponse, "description": "Invalid mood rating"}},
)
async def save_mood(
    current_user: CurrentUser,
    db: DBSession,
    mood_rating: Annotated[Optional[str], Form()] = None,
):
    """
    Record today's mood.

    A second check-in on the same day replaces the first one.
    """
    rating = validate_mood_rating(mood_rating)
    mood, created = await MoodService(db).save_mood(current_user.id, rating)

    body = BaseResponse(
        data=MoodSaveResult(mood=MoodOut.model_validate(mood), created=created),
        message="Mood saved",
    )
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=body.model_dump(mode="json"),
    )


@router.get("/history", response_model=BaseResponse[list[MoodOut]])
async def get_mood_history(current_user: CurrentUser, db: DBSession):
    """Last 30 moods, newest first."""
    moods = await MoodService(db).get_history(current_user.id)
    return BaseResponse(data=[MoodOut.model_validate(m) for m in moods])


@router.get("/today", response_model=BaseResponse[Optional[MoodOut]])
async def get_today_mood(current_user: CurrentUser, db: DBSession):
    mood = await MoodService(db).get_today_mood(current_user.id)
    return BaseResponse(data=MoodOut.model_validate(mood) if mood else None)
