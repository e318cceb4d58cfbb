"""
Shared Test Fixtures
====================

The app is exercised in-process over ``httpx.ASGITransport``. The
database session and the Supabase Auth client are replaced with mocks;
access tokens are real JWTs signed with the configured secret.
"""

import time
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

from app.config import settings
from app.core.rate_limit import RateLimiter
from app.core.security import JWT_ALGORITHM
from app.db.session import get_db
from app.main import app
from app.services.supabase_auth import AuthSession, SupabaseAuthClient, get_auth_client

USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
USER_EMAIL = "sam@example.com"


def make_token(
    user_id: uuid.UUID = USER_ID,
    email: str = USER_EMAIL,
    expires_in: int = 3600,
    audience: str = "authenticated",
    secret: str | None = None,
    metadata: dict | None = None,
) -> str:
    """Sign an access token the way Supabase Auth does."""
    now = int(time.time())
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": "authenticated",
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
        "user_metadata": metadata or {},
    }
    return jwt.encode(claims, secret or settings.SUPABASE_JWT_SECRET, algorithm=JWT_ALGORITHM)


def make_session(**token_kwargs) -> AuthSession:
    token = make_token(**token_kwargs)
    return AuthSession(
        access_token=token,
        refresh_token="refresh-token",
        expires_in=3600,
        user={"id": str(USER_ID), "email": USER_EMAIL, "user_metadata": {}},
    )


def db_result(first=None, items=None, scalar=None, rowcount=1) -> MagicMock:
    """A stand-in for the object returned by ``AsyncSession.execute``."""
    result = MagicMock()
    scalars = MagicMock()
    scalars.first.return_value = first
    scalars.all.return_value = list(items or [])
    result.scalars.return_value = scalars
    result.scalar_one_or_none.return_value = first
    result.scalar.return_value = scalar
    result.rowcount = rowcount
    return result


@pytest.fixture
def db() -> AsyncMock:
    session = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    session.begin_nested = MagicMock()
    session.execute.return_value = db_result()
    return session


@pytest.fixture
def auth_client() -> AsyncMock:
    return AsyncMock(spec=SupabaseAuthClient)


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
async def client(db, auth_client):
    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_client] = lambda: auth_client

    allowed = {"allowed": True, "remaining": 10, "reset_in": 60, "limit": 10}
    with patch.object(RateLimiter, "check_rate_limit", AsyncMock(return_value=allowed)):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac

    app.dependency_overrides.clear()
