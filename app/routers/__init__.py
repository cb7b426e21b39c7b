# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - social.py: Link resolution, post fetch and batch endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import social

__all__ = [
    "health",
    "social",
]
