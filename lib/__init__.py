# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - social/: Link resolution (platform detection, fetchers, cache)
# - supabase_client.py: Shared Supabase client for the readiness probe
# - utils.py: Shared utilities (error base class, text helpers)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.utils import ApplicationError, first_non_empty

__all__ = [
    "ApplicationError",
    "first_non_empty",
]
