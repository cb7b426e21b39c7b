# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .social_service import SocialService

__all__ = [
    "SocialService",
]
