"""
Settings API Endpoints
======================

Profile and account management: profile edits, email and password
changes, data export, account statistics, and account deletion.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import RedirectResponse

from app.core.cookies import clear_session_cookies
from app.core.errors import AppException, ErrorCodes, ValidationError
from app.dependencies import AuthClient, CurrentUser, DBSession
from app.schemas.account import AccountOut, AccountStats, DisplayNames, UserDataExport
from app.schemas.common import BaseResponse, ErrorResponse
from app.services.account_service import AccountService
from app.services.supabase_auth import SupabaseAuthError
from app.utils.validators import require_text, validate_email

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_PASSWORD_LENGTH = 6
DELETE_CONFIRMATION = "DELETE"


def provider_error(e: SupabaseAuthError, code: str = ErrorCodes.AUTH_PROVIDER_ERROR) -> AppException:
    """Client errors keep their status; anything else is a bad gateway."""
    upstream = e.status_code or 0
    return AppException(
        status_code=upstream if 400 <= upstream < 500 else status.HTTP_502_BAD_GATEWAY,
        code=code,
        message=e.message,
    )


@router.get("/profile", response_model=BaseResponse[DisplayNames])
async def get_user_profile(current_user: CurrentUser, db: DBSession):
    """Greeting names; falls back to defaults when the row is unavailable."""
    names = await AccountService(db).get_display_names(current_user.id)
    return BaseResponse(data=DisplayNames(**names))


@router.get("/account", response_model=BaseResponse[AccountOut])
async def get_account(current_user: CurrentUser, db: DBSession):
    profile = await AccountService(db).get_profile(current_user.id)
    data = profile.to_dict() if profile else {}
    data.update({"id": str(current_user.id), "email": current_user.email or data.get("email")})
    return BaseResponse(data=AccountOut(**data))


@router.put("/profile", response_model=BaseResponse[AccountOut])
async def update_profile(
    current_user: CurrentUser,
    db: DBSession,
    full_name: Annotated[Optional[str], Form()] = None,
    username: Annotated[Optional[str], Form()] = None,
    phone_number: Annotated[Optional[str], Form()] = None,
):
    profile = await AccountService(db).update_profile(
        current_user.id,
        current_user.email,
        full_name,
        username,
        phone_number,
    )
    data = profile.to_dict()
    data["id"] = str(current_user.id)
    return BaseResponse(data=AccountOut(**data), message="Profile updated successfully")


@router.put(
    "/email",
    response_model=BaseResponse[None],
    responses={400: {"model": ErrorResponse, "description": "Invalid email"}},
)
async def update_email(
    current_user: CurrentUser,
    auth_client: AuthClient,
    email: Annotated[Optional[str], Form()] = None,
):
    """Start an email change; the provider mails a confirmation link."""
    new_email = validate_email(email)
    try:
        await auth_client.update_user(current_user.access_token, {"email": new_email})
    except SupabaseAuthError as e:
        logger.warning("Email change failed for %s: %s", current_user.id, e.message)
        raise provider_error(e)

    return BaseResponse(message="Check your new email to confirm the change")


@router.put(
    "/password",
    response_model=BaseResponse[None],
    responses={400: {"model": ErrorResponse, "description": "Invalid password"}},
)
async def update_password(
    current_user: CurrentUser,
    auth_client: AuthClient,
    password: Annotated[Optional[str], Form()] = None,
    confirm_password: Annotated[Optional[str], Form()] = None,
):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            field="password",
            code=ErrorCodes.SETTINGS_INVALID_DATA,
        )
    if password != confirm_password:
        raise ValidationError(
            message="Passwords do not match",
            field="confirm_password",
            code=ErrorCodes.SETTINGS_INVALID_DATA,
        )

    try:
        await auth_client.update_user(current_user.access_token, {"password": password})
    except SupabaseAuthError as e:
        logger.warning("Password change failed for %s: %s", current_user.id, e.message)
        raise provider_error(e)

    return BaseResponse(message="Password updated successfully")


@router.get("/export", response_model=BaseResponse[UserDataExport])
async def export_user_data(current_user: CurrentUser, db: DBSession):
    data = await AccountService(db).export_user_data(current_user.id)
    return BaseResponse(data=UserDataExport(**data))


@router.get("/stats", response_model=BaseResponse[AccountStats])
async def get_account_stats(current_user: CurrentUser, db: DBSession):
    stats = await AccountService(db).get_account_stats(current_user.id)
    return BaseResponse(data=AccountStats(**stats))


@router.post(
    "/delete-account",
    responses={400: {"model": ErrorResponse, "description": "Not confirmed"}},
)
async def delete_account(
    request: Request,
    current_user: CurrentUser,
    db: DBSession,
    auth_client: AuthClient,
    confirmation: Annotated[Optional[str], Form()] = None,
):
    """
    Permanently delete the account.

    Requires the literal confirmation ``DELETE``. Removes the profile
    row, deletes the auth user through the ``delete_user`` database
    function, then signs out and clears cookies.
    """
    confirmation = require_text(
        confirmation,
        "Please type DELETE to confirm",
        "confirmation",
        ErrorCodes.SETTINGS_DELETE_NOT_CONFIRMED,
    )
    if confirmation != DELETE_CONFIRMATION:
        raise ValidationError(
            message="Please type DELETE to confirm",
            field="confirmation",
            code=ErrorCodes.SETTINGS_DELETE_NOT_CONFIRMED,
        )

    await AccountService(db).delete_profile(current_user.id)

    try:
        await auth_client.rpc("delete_user", current_user.access_token)
    except SupabaseAuthError as e:
        # Raising rolls back the profile deletion
        logger.error("Error deleting auth user %s: %s", current_user.id, e.message)
        raise provider_error(e, ErrorCodes.SETTINGS_DELETE_FAILED)

    try:
        await auth_client.sign_out(current_user.access_token)
    except SupabaseAuthError as e:
        logger.error("Error signing out deleted user %s: %s", current_user.id, e.message)

    logger.info("Deleted account %s", current_user.id)
    response = RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookies(response, request)
    return response
