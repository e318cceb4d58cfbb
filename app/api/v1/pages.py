"""
Page Endpoints
==============

Public entry pages and the auth error page. Signed-in visitors are
sent straight to the dashboard.
"""

from typing import Optional

from fastapi import APIRouter, Query, status
from fastapi.responses import RedirectResponse

from app.dependencies import CurrentUserOptional, DBSession
from app.schemas.account import ErrorPage
from app.schemas.common import BaseResponse
from app.schemas.wellbeing import DashboardOut
from app.services.dashboard_service import DashboardService

router = APIRouter()

ERROR_PAGES = {
    "login_failed": (
        "Login Failed",
        "The email or password you entered is incorrect. Please try again.",
    ),
    "signup_failed": (
        "Sign Up Failed",
        "We couldn't create your account. The email may already be registered.",
    ),
    "otp_send_failed": (
        "OTP Send Failed",
        "Failed to send OTP to your email. Please check your email address and try again.",
    ),
    "otp_verification_failed": (
        "OTP Verification Failed",
        "The OTP code is invalid or has expired. Please request a new one.",
    ),
    "missing_otp_fields": (
        "Invalid OTP Request",
        "Please enter both your email and the OTP code.",
    ),
    "reset_failed": (
        "Reset Failed",
        "Failed to send the password reset email. Please try again.",
    ),
    "resend_failed": (
        "Resend Failed",
        "Failed to resend the confirmation email. Please check your email address and try again.",
    ),
    "confirm_expired": (
        "Confirmation Link Expired",
        "The confirmation link has expired or is invalid. Please register again.",
    ),
    "unknown": (
        "Something went wrong",
        "We encountered an error while processing your request.",
    ),
}


def error_page(reason: Optional[str]) -> ErrorPage:
    """Title and message for an error reason; unknown reasons fall back."""
    if reason not in ERROR_PAGES:
        reason = "unknown"
    title, message = ERROR_PAGES[reason]
    return ErrorPage(reason=reason, title=title, message=message)


def _public_page(user, page: str, **extra) -> dict | RedirectResponse:
    if user is not None:
        return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)
    return {"page": page, **extra}


@router.get("/")
async def landing(current_user: CurrentUserOptional):
    return _public_page(current_user, "landing")


@router.get("/login")
async def login_page(
    current_user: CurrentUserOptional,
    mode: Optional[str] = Query(None),
):
    return _public_page(current_user, "login", mode=mode)


@router.get("/register")
async def register_page(current_user: CurrentUserOptional):
    return _public_page(current_user, "register")


@router.get("/error", response_model=ErrorPage)
async def error(reason: Optional[str] = Query(None)):
    return error_page(reason)


@router.get("/dashboard")
async def dashboard_page(current_user: CurrentUserOptional, db: DBSession):
    """Post-sign-in landing; anonymous visitors go to the login page."""
    if current_user is None:
        return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
    data = await DashboardService(db).get_dashboard(current_user)
    return BaseResponse(data=DashboardOut(**data))
