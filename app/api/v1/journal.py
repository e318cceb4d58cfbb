"""
Journal API Endpoints
=====================

Handles journal entry CRUD.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Form, status

from app.core.errors import ErrorCodes
from app.dependencies import CurrentUser, DBSession
from app.schemas.common import BaseResponse, ErrorResponse
from app.schemas.tracking import JournalOut
from app.services.journal_service import JournalService
from app.utils.validators import parse_uuid

router = APIRouter()


def _entry_id(entry_id: str):
    return parse_uuid(entry_id, "Journal ID is required", "id", ErrorCodes.JOURNAL_INVALID_DATA)


@router.get("", response_model=BaseResponse[list[JournalOut]])
async def get_journals(current_user: CurrentUser, db: DBSession):
    """List the user's entries, newest first."""
    entries = await JournalService(db).get_entries(current_user.id)
    return BaseResponse(data=[JournalOut.model_validate(e) for e in entries])


@router.get(
    "/{entry_id}",
    response_model=BaseResponse[JournalOut],
    responses={404: {"model": ErrorResponse, "description": "Entry not found"}},
)
async def get_journal(entry_id: str, current_user: CurrentUser, db: DBSession):
    entry = await JournalService(db).get_entry_by_id(_entry_id(entry_id), current_user.id)
    return BaseResponse(data=JournalOut.model_validate(entry))


@router.post(
    "",
    response_model=BaseResponse[JournalOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_journal(
    current_user: CurrentUser,
    db: DBSession,
    title: Annotated[Optional[str], Form()] = None,
    content: Annotated[Optional[str], Form()] = None,
):
    """
    Create an entry dated today.

    Blank content is stored as null.
    """
    entry = await JournalService(db).create_entry(current_user.id, title, content)
    return BaseResponse(data=JournalOut.model_validate(entry), message="Journal entry created")


@router.put(
    "/{entry_id}",
    response_model=BaseResponse[JournalOut],
    responses={404: {"model": ErrorResponse, "description": "Entry not found"}},
)
async def update_journal(
    entry_id: str,
    current_user: CurrentUser,
    db: DBSession,
    title: Annotated[Optional[str], Form()] = None,
    content: Annotated[Optional[str], Form()] = None,
):
    entry = await JournalService(db).update_entry(
        _entry_id(entry_id),
        current_user.id,
        title,
        content,
    )
    return BaseResponse(data=JournalOut.model_validate(entry), message="Journal entry updated")


@router.delete(
    "/{entry_id}",
    response_model=BaseResponse[None],
    responses={404: {"model": ErrorResponse, "description": "Entry not found"}},
)
async def delete_journal(entry_id: str, current_user: CurrentUser, db: DBSession):
    await JournalService(db).delete_entry(_entry_id(entry_id), current_user.id)
    return BaseResponse(message="Journal entry deleted")
