"""
Rate Limiter Tests
==================

Fixed-window counting against a mocked Redis client.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.rate_limit import RateLimiter


def _redis(count: int, ttl: int = 42) -> AsyncMock:
    redis = AsyncMock()
    redis.incr.return_value = count
    redis.ttl.return_value = ttl
    return redis


class TestRateLimiter:
    @pytest.mark.asyncio
    async def test_first_request_starts_window(self):
        redis = _redis(1, ttl=60)
        with patch("app.core.rate_limit.get_redis", AsyncMock(return_value=redis)):
            result = await RateLimiter.check_rate_limit("1.2.3.4", "auth")

        assert result == {"allowed": True, "remaining": 9, "reset_in": 60, "limit": 10}
        redis.incr.assert_awaited_once_with("ratelimit:auth:1.2.3.4")
        redis.expire.assert_awaited_once_with("ratelimit:auth:1.2.3.4", 60)

    @pytest.mark.asyncio
    async def test_over_email_limit(self):
        redis = _redis(6)
        with patch("app.core.rate_limit.get_redis", AsyncMock(return_value=redis)):
            result = await RateLimiter.check_rate_limit("1.2.3.4", "email")

        assert result["allowed"] is False
        assert result["remaining"] == 0
        assert result["reset_in"] == 42
        redis.expire.assert_not_called()

    @pytest.mark.asyncio
    async def test_fails_open_without_redis(self):
        with patch("app.core.rate_limit.get_redis", AsyncMock(side_effect=ConnectionError("down"))):
            result = await RateLimiter.check_rate_limit("1.2.3.4", "auth")

        assert result["allowed"] is True
        assert result["limit"] == 10
