"""
Physical Health API Endpoints
=============================

Daily weight, sleep and step logging.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Form, status
from fastapi.responses import JSONResponse

from app.dependencies import CurrentUser, DBSession
from app.schemas.common import BaseResponse, ErrorResponse
from app.schemas.tracking import PhysicalHealthOut, PhysicalHealthToday
from app.services.physical_health_service import (
    PhysicalHealthService,
    parse_complaints,
    serialize_log,
)

router = APIRouter()


async def today_status(service: PhysicalHealthService, user_id) -> PhysicalHealthToday:
    log = await service.get_today(user_id)
    return PhysicalHealthToday(
        loggedToday=log is not None,
        todayData=parse_complaints(log.complaints) if log else None,
    )


@router.post(
    "",
    response_model=BaseResponse[PhysicalHealthOut],
    responses={400: {"model": ErrorResponse, "description": "No measurements given"}},
)
async def save_physical_health(
    current_user: CurrentUser,
    db: DBSession,
    weight: Annotated[Optional[str], Form()] = None,
    sleep_hours: Annotated[Optional[str], Form()] = None,
    step_counts: Annotated[Optional[str], Form()] = None,
):
    """
    Record today's measurements.

    At least one field is required. A second save on the same day
    overwrites the first.
    """
    log, created = await PhysicalHealthService(db).save(
        current_user.id,
        weight=weight,
        sleep_hours=sleep_hours,
        step_counts=step_counts,
    )
    body = BaseResponse(
        data=PhysicalHealthOut(**serialize_log(log)),
        message="Physical health data saved",
    )
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=body.model_dump(mode="json"),
    )


@router.get("/recent", response_model=BaseResponse[list[PhysicalHealthOut]])
async def get_last_7_days(current_user: CurrentUser, db: DBSession):
    logs = await PhysicalHealthService(db).get_recent(current_user.id)
    return BaseResponse(data=[PhysicalHealthOut(**serialize_log(log)) for log in logs])


@router.get("/today", response_model=BaseResponse[PhysicalHealthToday])
async def get_today(current_user: CurrentUser, db: DBSession):
    return BaseResponse(data=await today_status(PhysicalHealthService(db), current_user.id))
