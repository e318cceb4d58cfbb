"""
Common Dependencies
===================

Shared dependencies used across the application.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.errors import AuthenticationError, ErrorCodes
from app.core.security import AuthUser, user_from_token
from app.db.session import get_db
from app.services.supabase_auth import SupabaseAuthClient, SupabaseAuthError, get_auth_client

logger = logging.getLogger(__name__)

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]

# Identity provider dependency
AuthClient = Annotated[SupabaseAuthClient, Depends(get_auth_client)]

# Bearer header is optional; browsers authenticate with the session cookie
security = HTTPBearer(auto_error=False)


def get_access_token(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Optional[str]:
    """Access token from the Authorization header, else the session cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_cookie_name)


async def refresh_user(request: Request, auth_client: SupabaseAuthClient) -> Optional[AuthUser]:
    """Exchange the refresh cookie for a new session, if there is one."""
    refresh_token = request.cookies.get(settings.refresh_cookie_name)
    if not refresh_token:
        return None

    try:
        session = await auth_client.refresh_session(refresh_token)
    except SupabaseAuthError as e:
        logger.info("Session refresh failed: %s", e.message)
        return None

    user = user_from_token(session.access_token)
    if user is not None:
        request.state.refreshed_session = session
    return user


async def get_current_user_optional(
    request: Request,
    token: Annotated[Optional[str], Depends(get_access_token)],
    auth_client: AuthClient,
) -> Optional[AuthUser]:
    """
    Get current user if authenticated, None otherwise.

    A browser session whose access cookie is missing or expired is
    renewed with the refresh cookie; the new cookies are written by
    ``SessionRefreshMiddleware``.

    Use this for endpoints that work with or without authentication.
    """
    user = user_from_token(token)
    if user is None and token == request.cookies.get(settings.access_cookie_name):
        user = await refresh_user(request, auth_client)
    if user is not None:
        request.state.user_id = str(user.id)
    return user


async def get_current_user(
    user: Annotated[Optional[AuthUser], Depends(get_current_user_optional)],
) -> AuthUser:
    """
    Get current authenticated user.

    Raises 401 if not authenticated or the token is invalid or expired.
    """
    if user is None:
        raise AuthenticationError(
            code=ErrorCodes.AUTH_NOT_AUTHENTICATED,
            message="Not authenticated",
        )
    return user


# Type alias for authenticated user dependency
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
CurrentUserOptional = Annotated[Optional[AuthUser], Depends(get_current_user_optional)]
