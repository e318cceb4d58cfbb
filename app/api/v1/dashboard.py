"""
Dashboard and Visualization Endpoints
=====================================

The signed-in overview and the mood chart page.
"""

import logging
from typing import Literal

from fastapi import APIRouter, Query

from app.dependencies import CurrentUser, DBSession
from app.schemas.common import BaseResponse
from app.schemas.wellbeing import DashboardOut, VisualizationOut
from app.services.dashboard_service import DashboardService
from app.services.mood_service import MoodService
from app.services.stats_service import build_week_view, calculate_mood_stats, period_start
from app.utils.helpers import local_today, utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard", response_model=BaseResponse[DashboardOut])
async def get_dashboard(current_user: CurrentUser, db: DBSession):
    """
    Overview for the signed-in user.

    Includes latest mood, the last week of moods with the derived stress
    level, latest physical health log, newest articles and saved
    suggestions, and goal count.
    """
    data = await DashboardService(db).get_dashboard(current_user)
    return BaseResponse(data=DashboardOut(**data))


@router.get("/visualization", response_model=BaseResponse[VisualizationOut])
async def get_mood_visualization(
    current_user: CurrentUser,
    db: DBSession,
    period: Literal["weekly", "monthly"] = Query("weekly"),
):
    now = utc_now()
    moods = await MoodService(db).get_moods_since(current_user.id, period_start(period, now))
    ratings = [m.mood_rating for m in moods]

    return BaseResponse(
        data=VisualizationOut(
            period=period,
            data=[m.to_dict() for m in moods],
            stats=calculate_mood_stats(ratings),
            weeklyMoods=build_week_view(moods, local_today(now)),
        )
    )
