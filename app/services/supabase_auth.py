"""
Supabase Auth Service
=====================

Thin async client for the Supabase Auth (GoTrue) REST API and the
PostgREST RPC endpoint.

Handles:
- Password sign-in, sign-up, and session refresh
- Email OTP / magic link send and verification
- PKCE code exchange for emailed confirmation links
- Password recovery and confirmation resend
- Updating and signing out the current user
- Calling database functions exposed through PostgREST (``rpc``)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class SupabaseAuthError(Exception):
    """Raised when the identity provider rejects or fails a request."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


@dataclass
class AuthSession:
    """Tokens issued by Supabase Auth for a signed-in user."""

    access_token: str
    refresh_token: str
    expires_in: int = 3600
    token_type: str = "bearer"
    user: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "AuthSession":
        if not data.get("access_token"):
            raise SupabaseAuthError("No session returned by auth server")
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token", ""),
            expires_in=int(data.get("expires_in") or 3600),
            token_type=data.get("token_type", "bearer"),
            user=data.get("user") or {},
        )


def _error_message(response: httpx.Response) -> tuple[str, Optional[str]]:
    """Pull the human-readable message and error code out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}", None

    if not isinstance(body, dict):
        return str(body)[:200], None

    message = (
        body.get("msg")
        or body.get("error_description")
        or body.get("message")
        or body.get("error")
        or f"HTTP {response.status_code}"
    )
    code = body.get("error_code") or body.get("code")
    return str(message), str(code) if code is not None else None


class SupabaseAuthClient:
    """Client for Supabase Auth operations."""

    def __init__(
        self,
        auth_url: Optional[str] = None,
        rest_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.auth_url = (auth_url or settings.auth_url).rstrip("/")
        self.rest_url = (rest_url or settings.rest_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.SUPABASE_ANON_KEY
        self.timeout = timeout or settings.SUPABASE_TIMEOUT_SECONDS
        self._transport = transport

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _get_headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        """Common headers; user calls carry the user's bearer token."""
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token or self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Any:
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=self._get_headers(access_token),
                )
            except httpx.TimeoutException:
                logger.error("Supabase request timed out: %s %s", method, url)
                raise SupabaseAuthError("Auth server timed out", status_code=504)
            except httpx.HTTPError as e:
                logger.error("Supabase request failed: %s %s: %s", method, url, e)
                raise SupabaseAuthError("Auth server unreachable", status_code=503)

        if response.status_code >= 400:
            message, code = _error_message(response)
            logger.warning(
                "Supabase returned %d for %s %s: %s",
                response.status_code,
                method,
                url,
                message,
            )
            raise SupabaseAuthError(message, status_code=response.status_code, code=code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.error("Supabase returned a non-JSON body for %s %s", method, url)
            raise SupabaseAuthError("Invalid response from auth server", status_code=502)

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = await self._request(
            "POST",
            f"{self.auth_url}/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return AuthSession.from_response(data or {})

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        data = await self._request(
            "POST",
            f"{self.auth_url}/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return AuthSession.from_response(data or {})

    async def exchange_code_for_session(self, code: str, code_verifier: str) -> AuthSession:
        """Complete a PKCE flow started by an emailed link."""
        data = await self._request(
            "POST",
            f"{self.auth_url}/token",
            params={"grant_type": "pkce"},
            json={"auth_code": code, "code_verifier": code_verifier},
        )
        return AuthSession.from_response(data or {})

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Optional[dict[str, Any]] = None,
        redirect_to: Optional[str] = None,
        code_challenge: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Register a new account.

        Returns the created user. With email confirmation enabled the
        response carries no session; the user confirms via email first.
        Passing a PKCE ``code_challenge`` makes the emailed link carry a
        code to exchange with the matching verifier.
        """
        payload = {"email": email, "password": password, "data": metadata or {}}
        if code_challenge:
            payload["code_challenge"] = code_challenge
            payload["code_challenge_method"] = "s256"
        data = await self._request(
            "POST",
            f"{self.auth_url}/signup",
            params={"redirect_to": redirect_to or settings.confirm_redirect_url},
            json=payload,
        )
        data = data or {}
        return data.get("user") or data

    # -------------------------------------------------------------------------
    # Email flows
    # -------------------------------------------------------------------------

    async def sign_in_with_otp(
        self,
        email: str,
        redirect_to: Optional[str] = None,
        create_user: bool = False,
    ) -> None:
        await self._request(
            "POST",
            f"{self.auth_url}/otp",
            params={"redirect_to": redirect_to or settings.confirm_redirect_url},
            json={"email": email, "create_user": create_user},
        )

    async def verify_otp(self, email: str, token: str, otp_type: str = "email") -> AuthSession:
        data = await self._request(
            "POST",
            f"{self.auth_url}/verify",
            json={"type": otp_type, "email": email, "token": token},
        )
        return AuthSession.from_response(data or {})

    async def verify_token_hash(self, token_hash: str, otp_type: str) -> AuthSession:
        data = await self._request(
            "POST",
            f"{self.auth_url}/verify",
            json={"type": otp_type, "token_hash": token_hash},
        )
        return AuthSession.from_response(data or {})

    async def reset_password_for_email(self, email: str, redirect_to: Optional[str] = None) -> None:
        await self._request(
            "POST",
            f"{self.auth_url}/recover",
            params={"redirect_to": redirect_to or settings.confirm_redirect_url},
            json={"email": email},
        )

    async def resend(
        self,
        email: str,
        resend_type: str = "signup",
        redirect_to: Optional[str] = None,
    ) -> None:
        await self._request(
            "POST",
            f"{self.auth_url}/resend",
            params={"redirect_to": redirect_to or settings.confirm_redirect_url},
            json={"type": resend_type, "email": email},
        )

    # -------------------------------------------------------------------------
    # Current user
    # -------------------------------------------------------------------------

    async def get_user(self, access_token: str) -> dict[str, Any]:
        return await self._request(
            "GET",
            f"{self.auth_url}/user",
            access_token=access_token,
        ) or {}

    async def update_user(self, access_token: str, attributes: dict[str, Any]) -> dict[str, Any]:
        """Update email and/or password of the signed-in user."""
        return await self._request(
            "PUT",
            f"{self.auth_url}/user",
            json=attributes,
            access_token=access_token,
        ) or {}

    async def sign_out(self, access_token: str, scope: str = "global") -> None:
        await self._request(
            "POST",
            f"{self.auth_url}/logout",
            params={"scope": scope},
            access_token=access_token,
        )

    # -------------------------------------------------------------------------
    # PostgREST RPC
    # -------------------------------------------------------------------------

    async def rpc(
        self,
        function: str,
        access_token: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Call a Postgres function as the signed-in user."""
        return await self._request(
            "POST",
            f"{self.rest_url}/rpc/{function}",
            json=params or {},
            access_token=access_token,
        )


def get_auth_client() -> SupabaseAuthClient:
    """FastAPI dependency returning a Supabase Auth client."""
    return SupabaseAuthClient()
