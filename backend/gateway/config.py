"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Rate limits are validated into RateLimit values at startup, not per request

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults work out-of-the-box with docker-compose (PostgreSQL) and tests override
      backends to "memory"
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gateway.core.domain_types import RateLimit, RateLimitTier


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    app_name: str = "edge-gateway"
    version: str = "1.0.0"
    # Exposes exception detail in 500 bodies. Never enable in production.
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://gateway:gateway@db:5432/gateway"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 5

    # Backends: "database" persists through SQLAlchemy, "memory" keeps state in-process
    counter_store_backend: Literal["database", "memory"] = "database"
    analytics_sink_backend: Literal["database", "memory"] = "database"
    submission_sink_backend: Literal["database", "log"] = "database"

    # Rate limits (count per window seconds)
    contact_rate_limit: int = 5
    contact_rate_window_seconds: int = 300
    booking_rate_limit: int = 3
    booking_rate_window_seconds: int = 900
    api_rate_limit: int = 100
    api_rate_window_seconds: int = 3600

    # Email (Resend)
    resend_api_key: str = ""
    email_api_url: str = "https://api.resend.com/emails"
    email_from: str = "contact@flong.dev"
    email_to: str = "hello@flong.dev"
    email_timeout_seconds: float = 10.0

    # CORS
    cors_allow_origin: str = "https://flong.dev"
    cors_allow_methods: str = "GET, POST, OPTIONS"
    cors_allow_headers: str = "Content-Type"
    cors_max_age_seconds: int = 86400

    # Honor CF-Connecting-IP / X-Forwarded-For only behind a proxy that overwrites them
    trust_proxy_headers: bool = False

    # Booking: how far ahead a slot may be requested
    booking_horizon_days: int = 365

    # Analytics
    analytics_window_hours: int = 24
    analytics_memory_capacity: int = 10_000
    shutdown_drain_seconds: float = 2.0

    # Redirects: slug -> absolute URL
    redirects: dict[str, str] = {
        "book": "https://flong.dev/#booking",
        "contact": "https://flong.dev/#contact",
        "projects": "https://flong.dev/#projects",
    }

    static_dir: str = "static"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def rate_limits(self) -> dict[RateLimitTier, RateLimit]:
        return {
            RateLimitTier.CONTACT: RateLimit(
                self.contact_rate_limit, self.contact_rate_window_seconds,
            ),
            RateLimitTier.BOOKING: RateLimit(
                self.booking_rate_limit, self.booking_rate_window_seconds,
            ),
            RateLimitTier.API: RateLimit(
                self.api_rate_limit, self.api_rate_window_seconds,
            ),
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
