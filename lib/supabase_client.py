# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# The workspace's managed backend. This service does not read or write any
# workspace data; it only keeps one shared client so the readiness probe can
# check the backend is reachable.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   if SupabaseClient.is_configured():
#       SupabaseClient.ping()
# =============================================================================

from __future__ import annotations

import logging

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(ApplicationError):
    """Error creating or talking to the Supabase client."""

    def __init__(self, message: str, code: str = "SUPABASE_ERROR", suggestion: str | None = None):
        super().__init__(message, code=code, suggestion=suggestion)


class SupabaseClient:
    """
    Singleton holder for the Supabase client.

    All methods are class methods for easy access without instantiation.
    """

    _instance: Client | None = None

    @classmethod
    def is_configured(cls) -> bool:
        """True when SUPABASE_URL and SUPABASE_SERVICE_KEY are both set."""
        return settings.supabase_configured

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses the service_role key, which is appropriate for server-side
        operations only.

        Raises:
            SupabaseClientError: If the client is not configured or creation fails
        """
        if cls._instance is None:
            if not cls.is_configured():
                raise SupabaseClientError(
                    message="Supabase is not configured",
                    code="CLIENT_NOT_CONFIGURED",
                    suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
                )
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def ping(cls) -> None:
        """
        Make one cheap authenticated call to the backend.

        Raises:
            SupabaseClientError: If the backend can't be reached
        """
        client = cls.get_client()
        try:
            client.storage.list_buckets()
        except Exception as e:
            logger.warning(f"Supabase ping failed: {e}")
            raise SupabaseClientError(
                message=f"Supabase is unreachable: {e}",
                code="BACKEND_UNREACHABLE",
                suggestion="Check network access to SUPABASE_URL and that the service key is valid",
            )

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests)."""
        cls._instance = None
