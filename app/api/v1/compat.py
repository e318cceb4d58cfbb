"""
Client Polling Endpoints
========================

Small uncached payloads polled by the web client for the header and
check-in widgets. Every response, including 401s, carries no-cache
headers.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.api.v1.physical_health import today_status
from app.dependencies import CurrentUserOptional, DBSession
from app.services.account_service import AccountService
from app.services.mood_service import MoodService
from app.services.physical_health_service import PhysicalHealthService

router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def no_cache_json(content: dict, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=NO_CACHE_HEADERS)


def unauthorized(**fields) -> JSONResponse:
    return no_cache_json({"error": "Unauthorized", **fields}, status.HTTP_401_UNAUTHORIZED)


@router.get("/mood-today")
async def mood_today(current_user: CurrentUserOptional, db: DBSession):
    if current_user is None:
        return unauthorized(moodRating=None)

    mood = await MoodService(db).get_today_mood(current_user.id)
    return no_cache_json({"moodRating": mood.mood_rating if mood else None})


@router.get("/physical-health-today")
async def physical_health_today(current_user: CurrentUserOptional, db: DBSession):
    if current_user is None:
        return unauthorized(loggedToday=False)

    today = await today_status(PhysicalHealthService(db), current_user.id)
    return no_cache_json(today.model_dump())


@router.get("/user-profile")
async def user_profile(current_user: CurrentUserOptional, db: DBSession):
    if current_user is None:
        return unauthorized()

    names = await AccountService(db).get_display_names(current_user.id)
    return no_cache_json(names)
