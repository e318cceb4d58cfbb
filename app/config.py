"""
Application Configuration
=========================

Centralized configuration using Pydantic Settings.
Loads from environment variables with validation.
"""

from functools import lru_cache
from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: str = Field(default="development")

    # Server
    PORT: int = Field(default=8000, description="Port to bind to")

    # Supabase (auth + database)
    SUPABASE_URL: str = Field(default="")
    SUPABASE_ANON_KEY: str = Field(default="")
    SUPABASE_JWT_SECRET: str = Field(default="change-this-secret-in-production")
    SUPABASE_JWT_AUDIENCE: str = Field(default="authenticated")
    SUPABASE_DATABASE_URL: str = Field(default="")
    SUPABASE_TIMEOUT_SECONDS: float = Field(default=10.0)

    # Redis (rate limiting)
    REDIS_URL: str = Field(default="redis://localhost:6379/0")

    # App Configuration
    APP_URL: str = Field(default="http://localhost:8000")
    APP_TIMEZONE: str = Field(default="UTC")
    ALLOWED_ORIGINS: str = Field(default="http://localhost:3000,http://localhost:8000")

    # Session cookies
    SESSION_COOKIE_PREFIX: str = Field(default="sb")
    SESSION_COOKIE_SECURE: bool = Field(default=False)
    SESSION_COOKIE_MAX_AGE: int = Field(default=60 * 60 * 24 * 7)

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse ALLOWED_ORIGINS into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def database_url_async(self) -> str:
        """Convert database URL to async format for asyncpg."""
        if self.SUPABASE_DATABASE_URL:
            return self.SUPABASE_DATABASE_URL.replace(
                "postgresql://", "postgresql+asyncpg://"
            )
        return ""

    @property
    def auth_url(self) -> str:
        """Base URL of the Supabase Auth (GoTrue) REST API."""
        return f"{self.SUPABASE_URL.rstrip('/')}/auth/v1"

    @property
    def rest_url(self) -> str:
        """Base URL of the Supabase PostgREST API."""
        return f"{self.SUPABASE_URL.rstrip('/')}/rest/v1"

    @property
    def confirm_redirect_url(self) -> str:
        """Where emailed links (confirmation, OTP, recovery) land."""
        return f"{(self.APP_URL or self.SUPABASE_URL).rstrip('/')}/auth/confirm"

    @property
    def access_cookie_name(self) -> str:
        return f"{self.SESSION_COOKIE_PREFIX}-access-token"

    @property
    def refresh_cookie_name(self) -> str:
        return f"{self.SESSION_COOKIE_PREFIX}-refresh-token"

    @property
    def code_verifier_cookie_name(self) -> str:
        return f"{self.SESSION_COOKIE_PREFIX}-code-verifier"

    @property
    def timezone(self) -> ZoneInfo:
        """Zone used to decide what "today" means."""
        return ZoneInfo(self.APP_TIMEZONE)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"

    @field_validator("SUPABASE_JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Ensure JWT secret is sufficiently long."""
        if len(v) < 32:
            raise ValueError("SUPABASE_JWT_SECRET must be at least 32 characters long")
        return v

    @field_validator("APP_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject unknown IANA zone names at startup."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Export a default settings instance
settings = get_settings()
