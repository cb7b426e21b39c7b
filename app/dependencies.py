# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

import httpx
from fastapi import Depends, Request

from lib.social.cache import PostCache, post_cache


def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Get the shared upstream HTTP client.

    Created in the app lifespan and stored on app.state.
    """
    return request.app.state.http_client


def get_post_cache() -> PostCache:
    """Get the process-wide post cache."""
    return post_cache


# Type aliases for dependency injection
HttpClientDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]
PostCacheDep = Annotated[PostCache, Depends(get_post_cache)]
