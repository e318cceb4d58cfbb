"""
Authentication API Endpoints
============================

Browser form posts for sign-in, sign-up, one-time codes, password
recovery, email confirmation, and logout.

Identity lives in Supabase Auth. Successful flows store the session in
cookies and redirect; provider failures redirect to ``/error?reason=``.
"""

import logging
from typing import Annotated, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.core.cookies import (
    clear_session_cookies,
    set_code_verifier_cookie,
    set_session_cookies,
)
from app.core.errors import ErrorCodes, ValidationError
from app.core.rate_limit import create_rate_limit_dependency
from app.core.security import code_challenge, generate_code_verifier, user_from_token
from app.dependencies import AuthClient, CurrentUser, DBSession, get_access_token
from app.schemas.account import AccountOut
from app.schemas.common import BaseResponse
from app.services.account_service import PROFILE_FIELDS, AccountService
from app.services.supabase_auth import AuthSession, SupabaseAuthError
from app.utils.validators import clean_text

logger = logging.getLogger(__name__)

router = APIRouter()

auth_rate_limit = create_rate_limit_dependency("auth")
email_rate_limit = create_rate_limit_dependency("email")


def redirect_to(path: str, **params: str) -> RedirectResponse:
    """303 redirect so the browser follows a form post with a GET."""
    url = f"{path}?{urlencode(params)}" if params else path
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def error_redirect(reason: str) -> RedirectResponse:
    return redirect_to("/error", reason=reason)


def safe_next(next_path: Optional[str]) -> str:
    """Only same-site relative paths are followed after confirmation."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return "/dashboard"
    return next_path


async def establish_session(
    db: DBSession,
    session: AuthSession,
    target: str = "/dashboard",
) -> RedirectResponse:
    """
    Store the session cookies and make sure a profile row exists for
    the signed-in user.
    """
    user = user_from_token(session.access_token)
    if user is not None:
        try:
            async with db.begin_nested():
                await AccountService(db).ensure_profile(
                    user.id,
                    user.email or session.user.get("email"),
                    session.user.get("user_metadata") or user.user_metadata,
                )
        except SQLAlchemyError as e:
            logger.error("Error creating profile for %s: %s", user.id, e)

    response = redirect_to(target)
    set_session_cookies(response, session)
    return response


# =============================================================================
# Password sign-in and sign-up
# =============================================================================


@router.post("/login", dependencies=[Depends(auth_rate_limit)])
async def login(
    db: DBSession,
    auth_client: AuthClient,
    email: Annotated[Optional[str], Form()] = None,
    password: Annotated[Optional[str], Form()] = None,
):
    """Sign in with email and password."""
    email = clean_text(email)
    password = clean_text(password)

    if not email or not password:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Email and password are required"},
        )

    try:
        session = await auth_client.sign_in_with_password(email, password)
    except SupabaseAuthError as e:
        logger.warning("Login failed for %s: %s", email, e.message)
        return error_redirect("login_failed")

    return await establish_session(db, session)


@router.post("/signup", dependencies=[Depends(auth_rate_limit)])
async def signup(
    auth_client: AuthClient,
    email: Annotated[Optional[str], Form()] = None,
    password: Annotated[Optional[str], Form()] = None,
    full_name: Annotated[Optional[str], Form()] = None,
    username: Annotated[Optional[str], Form()] = None,
    phone_number: Annotated[Optional[str], Form()] = None,
):
    """
    Register a new account.

    Profile fields travel in the user metadata and are copied to the
    profile table once the first session is established.
    """
    email = clean_text(email)
    password = clean_text(password)
    if not email or not password:
        return error_redirect("signup_failed")

    metadata = {
        "full_name": clean_text(full_name),
        "username": clean_text(username),
        "phone_number": clean_text(phone_number),
    }
    verifier = generate_code_verifier()

    try:
        await auth_client.sign_up(
            email,
            password,
            metadata={k: v for k, v in metadata.items() if v},
            redirect_to=settings.confirm_redirect_url,
            code_challenge=code_challenge(verifier),
        )
    except SupabaseAuthError as e:
        logger.warning("Signup failed for %s: %s", email, e.message)
        return error_redirect("signup_failed")

    response = redirect_to("/login", mode="waiting_for_confirmation")
    set_code_verifier_cookie(response, verifier)
    return response


# =============================================================================
# One-time codes
# =============================================================================


@router.post("/otp", dependencies=[Depends(email_rate_limit)])
async def send_otp(
    db: DBSession,
    auth_client: AuthClient,
    email: Annotated[Optional[str], Form()] = None,
):
    """Email a one-time code to a registered user."""
    email = clean_text(email)
    if not email or not await AccountService(db).email_exists(email):
        logger.info("OTP requested for unknown email")
        return error_redirect("otp_send_failed")

    try:
        await auth_client.sign_in_with_otp(email, redirect_to=settings.confirm_redirect_url)
    except SupabaseAuthError as e:
        logger.warning("OTP send failed for %s: %s", email, e.message)
        return error_redirect("otp_send_failed")

    return redirect_to("/login", mode="otp_verify")


@router.post("/verify-otp", dependencies=[Depends(auth_rate_limit)])
async def verify_otp(
    db: DBSession,
    auth_client: AuthClient,
    email: Annotated[Optional[str], Form()] = None,
    token: Annotated[Optional[str], Form()] = None,
    type: Annotated[str, Form()] = "recovery",
):
    """Exchange an emailed code for a session."""
    email = clean_text(email)
    token = clean_text(token)
    if not email or not token:
        return error_redirect("missing_otp_fields")

    try:
        session = await auth_client.verify_otp(email, token, otp_type=type)
    except SupabaseAuthError as e:
        logger.warning("OTP verification failed for %s: %s", email, e.message)
        return error_redirect("otp_verification_failed")

    return await establish_session(db, session)


# =============================================================================
# Recovery and confirmation
# =============================================================================


@router.post("/reset-password", dependencies=[Depends(email_rate_limit)])
async def reset_password(
    auth_client: AuthClient,
    email: Annotated[Optional[str], Form()] = None,
):
    email = clean_text(email)
    if not email:
        return error_redirect("reset_failed")

    try:
        await auth_client.reset_password_for_email(email, redirect_to=settings.confirm_redirect_url)
    except SupabaseAuthError as e:
        logger.warning("Password reset failed for %s: %s", email, e.message)
        return error_redirect("reset_failed")

    return redirect_to("/login")


@router.post("/resend-confirmation", dependencies=[Depends(email_rate_limit)])
async def resend_confirmation(
    auth_client: AuthClient,
    email: Annotated[Optional[str], Form()] = None,
):
    email = clean_text(email)
    if not email:
        return error_redirect("resend_failed")

    try:
        await auth_client.resend(email, resend_type="signup", redirect_to=settings.confirm_redirect_url)
    except SupabaseAuthError as e:
        logger.warning("Confirmation resend failed for %s: %s", email, e.message)
        return error_redirect("resend_failed")

    return redirect_to("/login", mode="waiting_for_confirmation")


@router.get("/confirm")
async def confirm(
    request: Request,
    db: DBSession,
    auth_client: AuthClient,
    code: Optional[str] = Query(None),
    token_hash: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    next: Optional[str] = Query(None),
):
    """
    Landing page for emailed links.

    Accepts either a PKCE ``code`` (verifier read from the cookie set at
    sign-up) or a ``token_hash`` with its ``type``.
    """
    try:
        if code:
            verifier = request.cookies.get(settings.code_verifier_cookie_name)
            if not verifier:
                raise SupabaseAuthError("Missing code verifier")
            session = await auth_client.exchange_code_for_session(code, verifier)
        elif token_hash and type:
            session = await auth_client.verify_token_hash(token_hash, type)
        else:
            raise SupabaseAuthError("Missing confirmation parameters")
    except SupabaseAuthError as e:
        logger.warning("Email confirmation failed: %s", e.message)
        return error_redirect("confirm_expired")

    response = await establish_session(db, session, safe_next(next))
    response.delete_cookie(settings.code_verifier_cookie_name, path="/")
    return response


# =============================================================================
# Session end and profile completion
# =============================================================================


@router.post("/logout")
async def logout(
    request: Request,
    auth_client: AuthClient,
    token: Annotated[Optional[str], Depends(get_access_token)],
):
    """Sign out everywhere and clear the session cookies."""
    if token:
        try:
            await auth_client.sign_out(token, scope="global")
        except SupabaseAuthError as e:
            logger.error("Error signing out: %s", e.message)

    response = redirect_to("/login")
    clear_session_cookies(response, request)
    return response


@router.post("/profile", response_model=BaseResponse[AccountOut])
async def complete_profile(
    current_user: CurrentUser,
    db: DBSession,
    full_name: Annotated[Optional[str], Form()] = None,
    username: Annotated[Optional[str], Form()] = None,
    phone_number: Annotated[Optional[str], Form()] = None,
):
    """Fill in the profile row after sign-up."""
    if not any(clean_text(v) for v in (full_name, username, phone_number)):
        raise ValidationError(
            message=f"At least one of {', '.join(PROFILE_FIELDS)} is required",
            code=ErrorCodes.SETTINGS_INVALID_DATA,
        )

    profile = await AccountService(db).update_profile(
        current_user.id,
        current_user.email,
        full_name,
        username,
        phone_number,
    )
    data = profile.to_dict()
    data["id"] = str(current_user.id)
    return BaseResponse(data=AccountOut(**data), message="Profile saved")
