# =============================================================================
# app/routers/social.py - Social Link Endpoints
# =============================================================================
# Resolve, fetch and batch-fetch social posts from arbitrary links.
# Routes are thin: validation and fetching live in SocialService.
#
# Endpoints (mounted under /api/v1/social):
#   POST /resolve                    - Detect platform + post id, no fetch
#   POST /fetch                      - Fetch one post
#   GET  /post/{platform}/{post_id}  - Fetch by platform and id
#   POST /batch                      - Fetch many posts concurrently
#   POST /scrape                     - Raw OpenGraph metadata for a page
#   GET  /platforms                  - Supported platforms
# =============================================================================

from fastapi import APIRouter, Path

from app.dependencies import HttpClientDep, PostCacheDep
from core.models.social import (
    BatchRequest,
    BatchResponse,
    OpenGraphData,
    PlatformInfo,
    ResolveResponse,
    SocialPost,
    UrlRequest,
)
from core.services.social_service import SocialService

router = APIRouter()


@router.post(
    "/resolve",
    response_model=ResolveResponse,
    response_model_exclude_none=True,
)
async def resolve_url(request: UrlRequest):
    """
    Detect which platform a link belongs to.

    No network calls are made. Unsupported links return
    `{"supported": false, "fallback": "opengraph"}` so the client knows a
    generic preview is still available.
    """
    return SocialService.resolve(request.url)


@router.post("/fetch", response_model=SocialPost)
async def fetch_post(
    request: UrlRequest,
    http: HttpClientDep,
    cache: PostCacheDep,
):
    """
    Fetch a normalized post for a link.

    Uses the platform's oEmbed/API strategy and falls back to OpenGraph
    scraping. Results are cached per canonical URL.

    Errors:
    - 400: Missing or malformed URL
    - 502: Provider unreachable or returned an unexpected payload
    """
    return await SocialService.fetch(request.url, http=http, cache=cache)


@router.get("/post/{platform}/{post_id:path}", response_model=SocialPost)
async def fetch_post_by_id(
    http: HttpClientDep,
    cache: PostCacheDep,
    platform: str = Path(..., examples=["youtube"]),
    post_id: str = Path(..., description="Post id; GitHub uses owner/repo", examples=["dQw4w9WgXcQ"]),
):
    """
    Fetch a post from its platform and id.

    The canonical URL is rebuilt from the pair, so
    `/post/github/fastapi/fastapi` fetches https://github.com/fastapi/fastapi.
    """
    return await SocialService.fetch_by_id(platform, post_id, http=http, cache=cache)


@router.post("/batch", response_model=BatchResponse)
async def fetch_batch(
    request: BatchRequest,
    http: HttpClientDep,
    cache: PostCacheDep,
):
    """
    Fetch up to 20 links concurrently.

    Always 200 when the batch size is valid; failed links are reported
    per item with `success: false` and an error record. Results keep the
    input order.
    """
    results = await SocialService.fetch_batch(request.urls, http=http, cache=cache)
    return BatchResponse(results=results)


@router.post("/scrape", response_model=OpenGraphData)
async def scrape_url(request: UrlRequest, http: HttpClientDep):
    """
    Return a page's OpenGraph metadata without platform handling.
    """
    return await SocialService.scrape(request.url, http=http)


@router.get("/platforms", response_model=list[PlatformInfo])
async def list_platforms():
    """List every platform the detector recognizes."""
    return SocialService.list_platforms()
