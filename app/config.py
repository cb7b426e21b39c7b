# =============================================================================
# app/config.py - Runtime Settings
# =============================================================================
# Every tunable of the link resolver comes from the process environment (or a
# local .env file) and is validated once by pydantic-settings.
#
#   from app.config import settings
#   settings.SOCIAL_BATCH_MAX_URLS
#
# Bad values (a negative TTL, a zero concurrency) fail at import time.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Resolver configuration, one attribute per environment variable.

    Read through the module-level `settings` object.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # The workspace data lives in Supabase. This service only probes it from
    # the readiness check, so both values are optional.

    SUPABASE_URL: str | None = Field(
        default=None,
        description="Supabase project URL probed by /health/ready"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Service key used for the readiness probe"
    )

    # -------------------------------------------------------------------------
    # Link Resolution
    # -------------------------------------------------------------------------

    SOCIAL_CACHE_TTL_SECONDS: int = Field(
        default=30 * 60,
        ge=0,
        description="Default cache TTL for fetched posts (platforms may override)"
    )

    SOCIAL_BATCH_MAX_URLS: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Maximum URLs accepted by one batch request"
    )

    SOCIAL_BATCH_CONCURRENCY: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Maximum in-flight upstream fetches per batch"
    )

    SOCIAL_FETCH_TIMEOUT_SECONDS: float = Field(
        default=8.0,
        gt=0,
        le=60,
        description="Timeout for each upstream HTTP call"
    )

    SOCIAL_USER_AGENT: str = Field(
        default="Mozilla/5.0 (compatible; LinkResolverBot/1.0)",
        description="User-Agent sent to providers and scraped pages"
    )

    GITHUB_TOKEN: str | None = Field(
        default=None,
        description="Optional GitHub token (raises the REST API rate limit)"
    )

    META_OEMBED_ACCESS_TOKEN: str | None = Field(
        default=None,
        description="Facebook app token for Instagram/Facebook oEmbed"
    )

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment stage"
    )

    DEBUG: bool = Field(
        default=False,
        description="DEBUG log level and uvicorn reload"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Bind address for uvicorn"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Bind port for uvicorn"
    )

    # Only honored in production; other stages allow any origin
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Comma-separated browser origins"
    )

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Empty env vars fall back to defaults instead of failing validation
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """CORS_ORIGINS split on commas, blanks dropped."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def supabase_configured(self) -> bool:
        """True when both Supabase URL and service key are set."""
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_KEY)

    @property
    def is_production(self) -> bool:
        """True for the production stage."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """Build Settings once per process; later calls return the same object."""
    return Settings()


settings = get_settings()
