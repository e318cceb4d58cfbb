"""
Session Cookies
===============

Stores the Supabase session in HTTP-only cookies so browser form posts
and page loads stay authenticated.
"""

from fastapi import Request, Response

from app.config import settings
from app.services.supabase_auth import AuthSession


def set_session_cookies(response: Response, session: AuthSession) -> None:
    """Write the access and refresh tokens onto the response."""
    common = {
        "httponly": True,
        "secure": settings.SESSION_COOKIE_SECURE,
        "samesite": "lax",
        "path": "/",
    }
    response.set_cookie(
        settings.access_cookie_name,
        session.access_token,
        max_age=session.expires_in,
        **common,
    )
    if session.refresh_token:
        response.set_cookie(
            settings.refresh_cookie_name,
            session.refresh_token,
            max_age=settings.SESSION_COOKIE_MAX_AGE,
            **common,
        )


def clear_session_cookies(response: Response, request: Request) -> None:
    """
    Expire every Supabase cookie the browser sent, plus the known
    session cookie names.
    """
    prefix = f"{settings.SESSION_COOKIE_PREFIX}-"
    names = {name for name in request.cookies if name.startswith(prefix)}
    names.update({
        settings.access_cookie_name,
        settings.refresh_cookie_name,
        settings.code_verifier_cookie_name,
    })

    for name in names:
        response.delete_cookie(name, path="/")


def set_code_verifier_cookie(response: Response, verifier: str) -> None:
    response.set_cookie(
        settings.code_verifier_cookie_name,
        verifier,
        max_age=settings.SESSION_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


class SessionRefreshMiddleware:
    """
    Raw ASGI middleware that writes a session renewed during the request
    (``request.state.refreshed_session``) back to the browser.

    Works for any response type, including redirects returned directly by
    a route. A response that already sets the access cookie, such as a
    logout, is left alone.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                session = state.get("refreshed_session")
                if session is not None:
                    message = {**message, "headers": _with_session_cookies(message.get("headers", []), session)}
            await send(message)

        await self.app(scope, receive, send_wrapper)


def _with_session_cookies(headers, session: AuthSession) -> list:
    headers = list(headers)
    marker = f"{settings.access_cookie_name}=".encode("latin-1")
    if any(name.lower() == b"set-cookie" and value.startswith(marker) for name, value in headers):
        return headers

    carrier = Response()
    set_session_cookies(carrier, session)
    return headers + [(name, value) for name, value in carrier.raw_headers if name == b"set-cookie"]
