# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Probes for orchestrators: /health (static), /health/ready (checks the
# upstream client and optional Supabase backend), /health/live.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

from app.config import settings
from lib.social.cache import post_cache
from lib.supabase_client import SupabaseClient, SupabaseClientError

router = APIRouter()

VERSION = "1.0.0"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Static status with build info."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Per-dependency probe results."""
    database: str
    http_client: str
    cached_posts: int


class ReadinessResponse(BaseModel):
    """Aggregate readiness plus the individual checks."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Process-is-up marker."""
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Answer without touching any dependency."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request):
    """
    Report whether this instance can serve link lookups.

    Checks the shared upstream HTTP client and, when configured, that the
    Supabase backend is reachable. An unconfigured backend does not make the
    service degraded since link resolution never touches it.
    """
    checks = ChecksResponse(
        database="not_configured",
        http_client="unknown",
        cached_posts=len(post_cache),
    )

    # Supabase
    if SupabaseClient.is_configured():
        try:
            SupabaseClient.ping()
            checks.database = "healthy"
        except SupabaseClientError as e:
            checks.database = f"unhealthy: {e.message[:50]}"

    # Check upstream client
    http_client = getattr(request.app.state, "http_client", None)
    if http_client is None:
        checks.http_client = "missing"
    elif http_client.is_closed:
        checks.http_client = "closed"
    else:
        checks.http_client = "healthy"

    # A missing backend is fine, a broken one is not
    all_healthy = (
        checks.database in ("healthy", "not_configured")
        and checks.http_client == "healthy"
    )

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """Always "alive" while the event loop is responsive."""
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
