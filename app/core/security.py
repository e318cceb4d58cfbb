"""
Security Module
===============

Verification of Supabase-issued access tokens.

Supabase Auth signs its access tokens with the project's JWT secret
(HS256). Verifying them locally lets every request resolve the current
user without a round-trip to the auth server.
"""

import base64
from dataclasses import dataclass, field
import hashlib
import secrets
from typing import Any, Optional
import uuid

from jose import JWTError, jwt

from app.config import settings

JWT_ALGORITHM = "HS256"


@dataclass
class AuthUser:
    """The authenticated identity carried by a Supabase access token."""

    id: uuid.UUID
    email: Optional[str] = None
    role: Optional[str] = None
    user_metadata: dict[str, Any] = field(default_factory=dict)
    access_token: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: dict[str, Any], token: Optional[str] = None) -> "AuthUser":
        return cls(
            id=uuid.UUID(claims["sub"]),
            email=claims.get("email"),
            role=claims.get("role"),
            user_metadata=claims.get("user_metadata") or {},
            access_token=token,
        )


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a Supabase access token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
        return payload
    except JWTError:
        return None


def user_from_token(token: Optional[str]) -> Optional[AuthUser]:
    """
    Resolve the authenticated user from an access token.

    Returns None for missing, expired, or malformed tokens, or tokens
    without a usable ``sub`` claim.
    """
    if not token:
        return None

    payload = decode_token(token)
    if payload is None or not payload.get("sub"):
        return None

    try:
        return AuthUser.from_claims(payload, token=token)
    except ValueError:
        return None


def generate_code_verifier() -> str:
    """Random PKCE verifier (RFC 7636, 43-128 URL-safe characters)."""
    return secrets.token_urlsafe(48)


def code_challenge(verifier: str) -> str:
    """S256 challenge for a PKCE verifier."""
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
