"""
Rate Limiting
=============

Redis-based fixed-window rate limiting for the auth form posts.
"""

import logging
from typing import Optional

from fastapi import Request

from app.core.errors import AppException, ErrorCodes
from app.services.redis_client import get_redis

logger = logging.getLogger(__name__)


class RateLimitExceeded(AppException):
    """Raised when a client exceeds its request budget."""

    def __init__(self, reset_in: int, limit: int):
        super().__init__(
            status_code=429,
            code=ErrorCodes.RATE_LIMIT_EXCEEDED,
            message=f"Rate limit exceeded. Try again in {reset_in} seconds.",
        )
        self.headers = {
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(reset_in),
            "Retry-After": str(reset_in),
        }


class RateLimiter:
    """
    Fixed window rate limiter using Redis.

    Rate limits are applied per client IP.

    Default limits:
        - Authentication form posts: 10 requests/minute
        - Email-sending flows (OTP, recovery, resend): 5 requests/minute
    """

    LIMITS = {
        "auth": {"max_requests": 10, "window_seconds": 60},
        "email": {"max_requests": 5, "window_seconds": 60},
    }

    @staticmethod
    def _get_key(identifier: str, action: str) -> str:
        """Generate rate limit key."""
        return f"ratelimit:{action}:{identifier}"

    @staticmethod
    async def check_rate_limit(
        identifier: str,
        action: str,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ) -> dict:
        """
        Check if request is within rate limit.

        Args:
            identifier: Client IP address
            action: Action type (auth, email)
            max_requests: Override max requests (optional)
            window_seconds: Override window size (optional)

        Returns:
            Dict with 'allowed', 'remaining', 'reset_in', 'limit' keys
        """
        limits = RateLimiter.LIMITS.get(action, RateLimiter.LIMITS["auth"])
        max_req = max_requests or limits["max_requests"]
        window = window_seconds or limits["window_seconds"]

        key = RateLimiter._get_key(identifier, action)

        try:
            client = await get_redis()

            current = await client.incr(key)
            if current == 1:
                await client.expire(key, window)

            ttl = await client.ttl(key)
            reset_in = ttl if ttl > 0 else window

            return {
                "allowed": current <= max_req,
                "remaining": max(max_req - current, 0),
                "reset_in": reset_in,
                "limit": max_req,
            }

        except Exception as e:
            # Allow request on error (fail open)
            logger.warning("Rate limit check error: %s", e)
            return {
                "allowed": True,
                "remaining": max_req,
                "reset_in": window,
                "limit": max_req,
            }


def create_rate_limit_dependency(action: str = "auth"):
    """
    Factory for rate limit dependencies.

    Usage:
        @router.post("/login", dependencies=[Depends(create_rate_limit_dependency("auth"))])
        async def login():
            ...
    """
    async def dependency(request: Request) -> None:
        identifier = request.client.host if request.client else "unknown"
        result = await RateLimiter.check_rate_limit(identifier, action)

        if not result["allowed"]:
            raise RateLimitExceeded(reset_in=result["reset_in"], limit=result["limit"])

    return dependency
