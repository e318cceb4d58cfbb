"""
Recharge API - Main Application
===============================

FastAPI application entry point with middleware configuration
and route registration.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import newrelic.agent

# Configure logging for the application (root logger defaults to WARNING)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.cookies import SessionRefreshMiddleware
from app.core.errors import setup_exception_handlers
from app.db.session import close_db, init_db
from app.services.redis_client import close_redis, init_redis

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# =============================================================================
# New Relic Transaction Enrichment Middleware (Raw ASGI)
# =============================================================================

class NewRelicTransactionMiddleware:
    """
    Raw ASGI middleware that tags every New Relic transaction with the
    route pattern, status, latency and, when signed in, the user id.

    Raw ASGI keeps the route handler in the same task so database and
    Redis spans stay attached to the transaction.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            txn = newrelic.agent.current_transaction()
            if txn:
                self._annotate(scope, status_code, (time.perf_counter() - start) * 1000)

    @staticmethod
    def _annotate(scope, status_code: int, duration_ms: float) -> None:
        route = scope.get("route")
        client = scope.get("client")

        newrelic.agent.add_custom_attributes([
            ("http.method", scope.get("method", "")),
            ("http.route", route.path if route else scope.get("path", "unknown")),
            ("http.status_code", status_code),
            ("http.duration_ms", round(duration_ms, 2)),
            ("http.client_ip", client[0] if client else "unknown"),
            ("environment", settings.ENVIRONMENT),
        ])

        # Set by the current-user dependency
        state = scope.get("state")
        user_id = state.get("user_id") if isinstance(state, dict) else getattr(state, "user_id", None)
        if user_id:
            newrelic.agent.add_custom_attribute("enduser.id", str(user_id))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Opens the database and Redis connections on startup and closes them
    on shutdown. Startup continues when either is unreachable so health
    checks still answer.
    """
    logger.info("Starting Recharge API (%s)", settings.ENVIRONMENT)

    try:
        await init_db()
    except Exception as e:
        logger.error("Database connection failed: %s", e)

    try:
        await init_redis()
    except Exception as e:
        logger.error("Redis connection failed: %s", e)

    yield

    logger.info("Shutting down Recharge API")
    await close_db()
    await close_redis()


# Create FastAPI application
app = FastAPI(
    title="Recharge API",
    description="""
## Recharge Mental Wellbeing Backend

Personal tracking for mood, goals, journaling and physical health, with
mood-matched relaxation suggestions and a curated article library.

### Authentication
Sign-in is handled by Supabase Auth. Browser form posts under `/auth`
set session cookies; API clients may send the access token as a Bearer
header instead.

### Rate Limits
- Sign-in, sign-up and code verification: 10 requests/minute
- Email-sending flows: 5 requests/minute
    """,
    version=API_VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    openapi_url="/openapi.json" if settings.is_development else None,
    lifespan=lifespan,
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Resource not found"},
        422: {"description": "Validation error"},
        429: {"description": "Rate limit exceeded"},
        500: {"description": "Internal server error"},
    },
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(SessionRefreshMiddleware)
app.add_middleware(NewRelicTransactionMiddleware)

setup_exception_handlers(app)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns the current status of the API.
    """
    return {
        "status": "healthy",
        "version": API_VERSION,
        "environment": settings.ENVIRONMENT,
    }


# =============================================================================
# Routes
# =============================================================================

from app.api.v1 import pages
app.include_router(pages.router, tags=["Pages"])

from app.api.v1 import auth
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])

from app.api.v1 import compat
app.include_router(compat.router, prefix="/api", tags=["Client Polling"])

from app.api.v1 import dashboard
app.include_router(dashboard.router, prefix="/api/v1", tags=["Dashboard"])

from app.api.v1 import mood, goals, journal, physical_health
app.include_router(mood.router, prefix="/api/v1/mood", tags=["Mood"])
app.include_router(goals.router, prefix="/api/v1/goals", tags=["Goals"])
app.include_router(journal.router, prefix="/api/v1/journal", tags=["Journal"])
app.include_router(physical_health.router, prefix="/api/v1/physical-health", tags=["Physical Health"])

from app.api.v1 import relaxation, articles
app.include_router(relaxation.router, prefix="/api/v1/relaxation", tags=["Relaxation"])
app.include_router(articles.router, prefix="/api/v1/articles", tags=["Articles"])

from app.api.v1 import settings as settings_routes
app.include_router(settings_routes.router, prefix="/api/v1/settings", tags=["Settings"])
