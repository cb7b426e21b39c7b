# =============================================================================
# core/services/social_service.py - Link Resolution Service
# =============================================================================
# Entry points the API routers call. Each method validates its input,
# delegates to lib.social and returns models from core.models.social.
#
# The HTTP client and cache are passed in by the caller so the app can
# share one AsyncClient across requests and tests can swap in fakes.
# =============================================================================

import logging

import httpx

from app.exceptions import UnsupportedPlatformError, UrlRequiredError
from core.models.social import (
    BatchItemResult,
    FetchErrorKind,
    OpenGraphData,
    PlatformInfo,
    ResolveResponse,
    SocialPost,
    SupportedPlatform,
)
from lib.social.cache import PostCache
from lib.social.errors import FetchError
from lib.social.fetchers import fetch_social_post, fetch_social_posts_batch, scrape_open_graph
from lib.social.oembed import RECONSTRUCTABLE_PLATFORMS, get_oembed_endpoint, reconstruct_url
from lib.social.platform_detector import detect_platform, get_platform_info, is_valid_url

logger = logging.getLogger(__name__)


def _require_url(url: str | None) -> str:
    """Reject blank and malformed URLs before any work is done."""
    if url is None or not url.strip():
        raise UrlRequiredError()
    if not is_valid_url(url):
        raise FetchError(FetchErrorKind.INVALID_URL, "Invalid URL format")
    return url.strip()


class SocialService:
    """
    Service for resolving links into social posts.

    All methods are static; shared state (HTTP client, cache) is passed in.
    """

    @staticmethod
    def resolve(url: str | None) -> ResolveResponse:
        """
        Classify a URL without fetching it.

        Returns:
            ResolveResponse with supported=True and the detection result,
            or supported=False with the OpenGraph fallback hint

        Raises:
            UrlRequiredError: url is missing or blank
            FetchError(invalid_url): url is not an http(s) URL
        """
        url = _require_url(url)
        detected = detect_platform(url)

        if detected is None:
            return ResolveResponse(supported=False, fallback="opengraph", url=url)

        return ResolveResponse(
            supported=True,
            url=url,
            platform=detected.platform,
            post_id=detected.post_id,
            params=detected.params,
        )

    @staticmethod
    async def fetch(
        url: str | None,
        http: httpx.AsyncClient | None = None,
        cache: PostCache | None = None,
    ) -> SocialPost:
        """Fetch one post (platform strategy, then OpenGraph)."""
        url = _require_url(url)
        return await fetch_social_post(url, http=http, cache=cache)

    @staticmethod
    async def fetch_by_id(
        platform: str,
        post_id: str,
        http: httpx.AsyncClient | None = None,
        cache: PostCache | None = None,
    ) -> SocialPost:
        """
        Fetch a post from its platform and id.

        The canonical URL is rebuilt from (platform, post_id) and then
        fetched like any other link.

        Raises:
            UnsupportedPlatformError: unknown platform, or no URL template
        """
        try:
            resolved = SupportedPlatform(platform.lower())
        except ValueError:
            raise UnsupportedPlatformError(platform)

        if resolved not in RECONSTRUCTABLE_PLATFORMS:
            raise UnsupportedPlatformError(platform)

        url = reconstruct_url(resolved, post_id)
        if url is None:
            raise UnsupportedPlatformError(platform, post_id=post_id)

        logger.debug(f"Reconstructed {resolved.value}/{post_id} as {url}")
        return await fetch_social_post(url, http=http, cache=cache)

    @staticmethod
    async def fetch_batch(
        urls: list[str],
        http: httpx.AsyncClient | None = None,
        cache: PostCache | None = None,
    ) -> list[BatchItemResult]:
        """Fetch up to SOCIAL_BATCH_MAX_URLS links concurrently."""
        return await fetch_social_posts_batch(urls, http=http, cache=cache)

    @staticmethod
    async def scrape(
        url: str | None,
        http: httpx.AsyncClient,
    ) -> OpenGraphData:
        """Return a page's raw OpenGraph metadata (no caching)."""
        url = _require_url(url)
        detected = detect_platform(url)
        return await scrape_open_graph(http, url, detected.platform if detected else None)

    @staticmethod
    def list_platforms() -> list[PlatformInfo]:
        """Display info for every detectable platform."""
        platforms = []
        for platform in SupportedPlatform:
            if platform == SupportedPlatform.UNKNOWN:
                continue
            name, color = get_platform_info(platform)
            platforms.append(
                PlatformInfo(
                    platform=platform,
                    name=name,
                    color=color,
                    has_oembed=get_oembed_endpoint(platform) is not None,
                )
            )
        return platforms
