# =============================================================================
# lib/social/fetchers.py - Social Post Fetchers
# =============================================================================
# Multi-strategy fetching: oEmbed, platform REST APIs, OpenGraph scraping.
#
# Each platform-specific strategy is registered with the @strategy decorator
# and looked up from STRATEGIES by platform. Fetch order for one URL:
#   1. validate       -> FetchError(invalid_url)
#   2. detect platform
#   3. cache lookup by canonical URL
#   4. platform strategy (if one is registered)
#   5. OpenGraph scrape when there is no strategy or the strategy failed
#   6. cache store with the platform TTL
#
# Example:
#   @strategy(SupportedPlatform.VIMEO)
#   async def fetch_vimeo_video(http, url, detected):
#       data = await fetch_oembed(http, url, detected)
#       return VimeoVideo(...)
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import re
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, AsyncIterator, Awaitable, Callable, Sequence
from urllib.parse import urlsplit

import httpx
from bs4 import BeautifulSoup
from pydantic import ValidationError

from app.config import settings
from core.models.social import (
    BatchItemResult,
    FetchErrorDetail,
    FetchErrorKind,
    GenericSocialPost,
    GitHubRepo,
    InstagramPost,
    OpenGraphData,
    PlatformDetectionResult,
    RedditPost,
    SocialAuthor,
    SocialMedia,
    SocialMetrics,
    SocialPost,
    SpotifyContent,
    SupportedPlatform,
    TikTokVideo,
    TwitterPost,
    VimeoVideo,
    YouTubeVideo,
)
from lib.social.cache import PostCache, cache_ttl_for, post_cache
from lib.social.errors import BatchSizeError, FetchError
from lib.social.oembed import OEMBED_TOKEN_REQUIRED, build_oembed_url
from lib.social.opengraph import parse_open_graph
from lib.social.platform_detector import (
    detect_platform,
    get_platform_info,
    get_spotify_content_type,
    is_valid_url,
    normalize_url,
)
from lib.utils import first_non_empty

logger = logging.getLogger(__name__)

P = SupportedPlatform


# =============================================================================
# Strategy Registry
# =============================================================================

# Takes (http client, input URL, detection result) and returns a post
StrategyFunc = Callable[
    [httpx.AsyncClient, str, PlatformDetectionResult], Awaitable[SocialPost]
]

STRATEGIES: dict[SupportedPlatform, StrategyFunc] = {}


def strategy(platform: SupportedPlatform):
    """
    Decorator to register the fetch strategy for a platform.

    Usage:
        @strategy(SupportedPlatform.YOUTUBE)
        async def fetch_youtube_video(http, url, detected):
            ...
    """
    def decorator(func: StrategyFunc) -> StrategyFunc:
        STRATEGIES[platform] = func
        return func
    return decorator


def list_strategies() -> list[str]:
    """Platforms with a dedicated strategy (others use OpenGraph)."""
    return [platform.value for platform in STRATEGIES]


# =============================================================================
# HTTP Helpers
# =============================================================================

def build_http_client(timeout: float | None = None) -> httpx.AsyncClient:
    """
    Create the AsyncClient used for upstream calls.

    The timeout applies to each request, so one slow provider fails its own
    item instead of stalling a whole batch.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout or settings.SOCIAL_FETCH_TIMEOUT_SECONDS),
        follow_redirects=True,
        headers={
            "User-Agent": settings.SOCIAL_USER_AGENT,
            "Accept-Language": "en-US,en;q=0.9",
        },
    )


@asynccontextmanager
async def _client_scope(http: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the caller's client, or a temporary one closed on exit."""
    if http is not None:
        yield http
        return
    async with build_http_client() as client:
        yield client


def _provider_name(platform: SupportedPlatform | None) -> str:
    return get_platform_info(platform)[0] if platform else "Page"


async def _request(
    http: httpx.AsyncClient,
    url: str,
    platform: SupportedPlatform | None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """GET a URL, translating transport failures and non-2xx to FetchError."""
    name = _provider_name(platform)
    try:
        response = await http.get(url, headers=headers)
    except httpx.TimeoutException:
        raise FetchError(
            FetchErrorKind.UPSTREAM_ERROR,
            f"{name} request timed out",
            platform=platform,
        )
    except httpx.HTTPError as e:
        raise FetchError(
            FetchErrorKind.UPSTREAM_ERROR,
            f"{name} request failed: {e}",
            platform=platform,
        )

    if not response.is_success:
        raise FetchError(
            FetchErrorKind.UPSTREAM_ERROR,
            f"{name} returned HTTP {response.status_code}",
            platform=platform,
            status_code=response.status_code,
        )
    return response


async def _get_json(
    http: httpx.AsyncClient,
    url: str,
    platform: SupportedPlatform | None,
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """GET a URL and decode a JSON object body."""
    response = await _request(http, url, platform, headers={"Accept": "application/json", **(headers or {})})
    try:
        data = response.json()
    except ValueError:
        raise FetchError(
            FetchErrorKind.PARSE_ERROR,
            f"{_provider_name(platform)} returned a non-JSON response",
            platform=platform,
        )
    if not isinstance(data, dict):
        raise FetchError(
            FetchErrorKind.PARSE_ERROR,
            f"{_provider_name(platform)} returned unexpected JSON ({type(data).__name__})",
            platform=platform,
        )
    return data


def _require(data: dict[str, Any], key: str, platform: SupportedPlatform) -> str:
    """Pull a required non-empty string field out of a provider payload."""
    value = first_non_empty(data.get(key))
    if value is None:
        raise FetchError(
            FetchErrorKind.PARSE_ERROR,
            f"{_provider_name(platform)} response is missing '{key}'",
            platform=platform,
        )
    return value


def _as_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _handle_from_profile_url(profile_url: str | None) -> str | None:
    """Last path segment of a profile URL, without a leading "@"."""
    if not profile_url:
        return None
    segments = [s for s in urlsplit(profile_url).path.split("/") if s]
    return segments[-1].lstrip("@") if segments else None


# =============================================================================
# oEmbed & OpenGraph
# =============================================================================

async def fetch_oembed(
    http: httpx.AsyncClient,
    url: str,
    detected: PlatformDetectionResult,
    max_width: int | None = None,
    max_height: int | None = None,
) -> dict[str, Any]:
    """
    Call the platform's oEmbed endpoint for a URL.

    Raises:
        FetchError(upstream_error): network failure, non-2xx, or the
            provider needs a credential that isn't configured
        FetchError(parse_error): body is not a JSON object
        FetchError(unsupported_platform): platform has no oEmbed endpoint
    """
    platform = detected.platform
    token = settings.META_OEMBED_ACCESS_TOKEN

    if platform in OEMBED_TOKEN_REQUIRED and not token:
        raise FetchError(
            FetchErrorKind.UPSTREAM_ERROR,
            f"{_provider_name(platform)} oEmbed requires META_OEMBED_ACCESS_TOKEN, which is not configured",
            platform=platform,
        )

    target = build_oembed_url(
        platform,
        detected.post_id,
        detected.params,
        content_url=url,
        access_token=token,
        max_width=max_width,
        max_height=max_height,
    )
    if target is None:
        raise FetchError(
            FetchErrorKind.UNSUPPORTED_PLATFORM,
            f"{_provider_name(platform)} has no oEmbed endpoint",
            platform=platform,
        )

    return await _get_json(http, target, platform)


async def scrape_open_graph(
    http: httpx.AsyncClient,
    url: str,
    platform: SupportedPlatform | None = None,
) -> OpenGraphData:
    """Fetch a page and parse its OpenGraph/meta preview tags."""
    response = await _request(
        http,
        url,
        platform,
        headers={"Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"},
    )
    return parse_open_graph(response.text, str(response.url))


async def fetch_generic_post(
    http: httpx.AsyncClient,
    url: str,
    source_platform: SupportedPlatform | None = None,
) -> GenericSocialPost:
    """
    Build a GenericSocialPost from the page's OpenGraph tags.

    This is the catch-all: it succeeds for any fetchable page, even one
    without preview tags (fields are then left empty).
    """
    og = await scrape_open_graph(http, url, source_platform)
    author = None
    if og.author:
        author = SocialAuthor(name=og.author, handle=og.author)

    return GenericSocialPost(
        id=url,
        url=url,
        title=og.title,
        thumbnail_url=og.image,
        author=author,
        source_platform=source_platform,
        open_graph=og,
    )


# =============================================================================
# Twitter / X
# =============================================================================

def _tweet_text(embed_html: str | None) -> str:
    """Text of the first paragraph in the oEmbed blockquote."""
    if not embed_html:
        return ""
    paragraph = BeautifulSoup(embed_html, "html.parser").find("p")
    return paragraph.get_text(" ", strip=True) if paragraph else ""


@strategy(P.TWITTER)
async def fetch_twitter_post(
    http: httpx.AsyncClient, url: str, detected: PlatformDetectionResult
) -> TwitterPost:
    data = await fetch_oembed(http, url, detected)

    embed_html = first_non_empty(data.get("html"))
    author_name = first_non_empty(data.get("author_name"), detected.params.get("username"))
    if embed_html is None and author_name is None:
        raise FetchError(
            FetchErrorKind.PARSE_ERROR,
            "Twitter oEmbed response has neither html nor author_name",
            platform=P.TWITTER,
        )

    author_url = first_non_empty(data.get("author_url"))
    handle = (
        first_non_empty(detected.params.get("username"), _handle_from_profile_url(author_url))
        or author_name
    )
    text = _tweet_text(embed_html)

    return TwitterPost(
        id=detected.post_id,
        url=url,
        title=text or None,
        author=SocialAuthor(
            name=author_name or handle,
            handle=handle,
            profile_url=author_url or f"https://twitter.com/{handle}",
        ),
        text=text,
        embed_html=embed_html,
    )


# =============================================================================
# YouTube
# =============================================================================

def youtube_thumbnails(video_id: str) -> dict[str, str]:
    """Static i.ytimg.com thumbnail URLs for a video id."""
    base = f"https://i.ytimg.com/vi/{video_id}"
    return {
        "default": f"{base}/default.jpg",
        "medium": f"{base}/mqdefault.jpg",
        "high": f"{base}/hqdefault.jpg",
        "maxres": f"{base}/maxresdefault.jpg",
    }


@strategy(P.YOUTUBE)
async def fetch_youtube_video(
    http: httpx.AsyncClient, url: str, detected: PlatformDetectionResult
) -> YouTubeVideo:
    data = await fetch_oembed(http, url, detected, max_width=560)

    title = _require(data, "title", P.YOUTUBE)
    video_id = detected.post_id
    thumbnails = youtube_thumbnails(video_id)
    author_url = first_non_empty(data.get("author_url"))
    author_name = first_non_empty(data.get("author_name")) or "Unknown"

    return YouTubeVideo(
        id=video_id,
        url=url,
        title=title,
        thumbnail_url=first_non_empty(data.get("thumbnail_url")) or thumbnails["high"],
        author=SocialAuthor(
            name=author_name,
            handle=_handle_from_profile_url(author_url) or author_name,
            profile_url=author_url,
        ),
        video_id=video_id,
        thumbnails=thumbnails,
        is_short=detected.params.get("is_short") == "true",
        embed_html=first_non_empty(data.get("html")),
    )


# =============================================================================
# Instagram
# =============================================================================

# og:title looks like: Jane Doe on Instagram: "caption text"
_INSTAGRAM_TITLE = re.compile(
    r"^(?P<author>.+?)\s+on Instagram[:\s]+[\"“]?(?P<caption>.*?)[\"”]?$",
    re.IGNORECASE | re.DOTALL,
)
# og:description looks like: 1,234 likes, 56 comments - janedoe on May 1, 2024: ...
_INSTAGRAM_HANDLE = re.compile(r"comments?\s*-\s*([\w.]+)\s+on\s+", re.IGNORECASE)


def split_instagram_title(title: str | None) -> tuple[str | None, str]:
    """Split an Instagram og:title into (author, caption)."""
    if not title:
        return None, ""
    match = _INSTAGRAM_TITLE.match(title.strip())
    if match:
        return match.group("author").strip(), match.group("caption").strip()
    return None, title.strip()


@strategy(P.INSTAGRAM)
async def fetch_instagram_post(
    http: httpx.AsyncClient, url: str, detected: PlatformDetectionResult
) -> InstagramPost:
    """
    Instagram post via Graph oEmbed when a Meta token is configured,
    otherwise via the page's own OpenGraph tags.
    """
    is_reel = any(part in url for part in ("/reel/", "/reels/", "/tv/"))
    username = detected.params.get("username")

    if settings.META_OEMBED_ACCESS_TOKEN:
        data = await fetch_oembed(http, url, detected)
        author_name = _require(data, "author_name", P.INSTAGRAM)
        handle = username or author_name
        caption = first_non_empty(data.get("title")) or ""
        image = first_non_empty(data.get("thumbnail_url"))
    else:
        og = await scrape_open_graph(http, url, P.INSTAGRAM)
        if og.is_empty:
            raise FetchError(
                FetchErrorKind.PARSE_ERROR,
                "Instagram page exposed no preview metadata",
                platform=P.INSTAGRAM,
            )
        title_author, caption = split_instagram_title(og.title)
        handle_match = _INSTAGRAM_HANDLE.search(og.description or "")
        handle = (handle_match.group(1) if handle_match else None) or username or title_author or "instagram"
        author_name = title_author or handle
        image = og.image

    media = []
    if image:
        media.append(SocialMedia(type="video" if is_reel else "image", url=image, thumbnail_url=image))

    return InstagramPost(
        id=detected.post_id,
        url=url,
        title=caption or None,
        thumbnail_url=image,
        author=SocialAuthor(
            name=author_name,
            handle=handle,
            profile_url=f"https://www.instagram.com/{handle}/",
        ),
        caption=caption,
        media=media,
        post_type="reel" if is_reel else "image",
    )


# =============================================================================
# Reddit
# =============================================================================

_REDDIT_COMMENT = re.compile(r"/comment/\w+|/comments/\w+/[^/]+/\w+", re.IGNORECASE)
_REDDIT_SUBREDDIT_IN_HTML = re.compile(r"/r/([^/'\"<>]+)")


@strategy(P.REDDIT)
async def fetch_reddit_post(
    http: httpx.AsyncClient, url: str, detected: PlatformDetectionResult
) -> RedditPost:
    data = await fetch_oembed(http, url, detected)

    title = _require(data, "title", P.REDDIT)
    is_comment = bool(_REDDIT_COMMENT.search(url))
    embed_html = first_non_empty(data.get("html"))

    html_match = _REDDIT_SUBREDDIT_IN_HTML.search(embed_html or "")
    subreddit = (html_match.group(1) if html_match else None) or detected.params.get("subreddit") or "reddit"

    author_name = first_non_empty(data.get("author_name")) or "[deleted]"

    return RedditPost(
        id=detected.post_id,
        url=url,
        title=f"Comment on: {title}" if is_comment else title,
        author=SocialAuthor(
            name=author_name,
            handle=author_name,
            profile_url=f"https://www.reddit.com/user/{author_name}",
        ),
        subreddit=subreddit,
        is_comment=is_comment,
        permalink=url,
        embed_html=embed_html,
    )


# =============================================================================
# GitHub
# =============================================================================

@strategy(P.GITHUB)
async def fetch_github_repo(
    http: httpx.AsyncClient, url: str, detected: PlatformDetectionResult
) -> GitHubRepo:
    """Repository metadata from the REST API. Other GitHub pages use OpenGraph."""
    content_type = detected.params.get("content_type", "repo")
    api_url = build_oembed_url(P.GITHUB, detected.post_id, detected.params)
    if api_url is None:
        raise FetchError(
            FetchErrorKind.UNSUPPORTED_PLATFORM,
            f"GitHub {content_type} links have no API mapping",
            platform=P.GITHUB,
        )

    headers = {"Accept": "application/vnd.github+json"}
    if settings.GITHUB_TOKEN:
        headers["Authorization"] = f"Bearer {settings.GITHUB_TOKEN}"

    try:
        repo = await _get_json(http, api_url, P.GITHUB, headers=headers)
    except FetchError as e:
        if e.status_code in (403, 429) and not settings.GITHUB_TOKEN:
            raise FetchError(
                FetchErrorKind.UPSTREAM_ERROR,
                "GitHub API rate limit reached; set GITHUB_TOKEN to raise it",
                platform=P.GITHUB,
                status_code=e.status_code,
            )
        raise

    owner = repo.get("owner")
    full_name = first_non_empty(repo.get("full_name"))
    if not isinstance(owner, dict) or full_name is None:
        raise FetchError(
            FetchErrorKind.PARSE_ERROR,
            "GitHub API response is missing owner or full_name",
            platform=P.GITHUB,
        )

    login = first_non_empty(owner.get("login")) or full_name.split("/")[0]
    license_info = repo.get("license") or {}

    return GitHubRepo(
        id=str(repo.get("id") or detected.post_id),
        url=url,
        title=full_name,
        thumbnail_url=owner.get("avatar_url"),
        author=SocialAuthor(
            name=login,
            handle=login,
            avatar=owner.get("avatar_url"),
            profile_url=owner.get("html_url") or f"https://github.com/{login}",
        ),
        metrics=SocialMetrics(
            stars=_as_int(repo.get("stargazers_count")) or 0,
            forks=_as_int(repo.get("forks_count")) or 0,
            watchers=_as_int(repo.get("watchers_count")) or 0,
            issues=_as_int(repo.get("open_issues_count")),
        ),
        content_type="repo",
        name=first_non_empty(repo.get("name")) or full_name.split("/")[-1],
        full_name=full_name,
        description=repo.get("description"),
        language=repo.get("language"),
        topics=list(repo.get("topics") or []),
        license=license_info.get("spdx_id") if isinstance(license_info, dict) else None,
        is_private=bool(repo.get("private", False)),
        default_branch=repo.get("default_branch"),
        created_at=repo.get("created_at"),
        updated_at=repo.get("updated_at"),
    )


# =============================================================================
# Spotify
# =============================================================================

_SPOTIFY_TYPES = ("track", "album", "playlist", "episode", "show", "artist")


@strategy(P.SPOTIFY)
async def fetch_spotify_content(
    http: httpx.AsyncClient, url: str, detected: PlatformDetectionResult
) -> SpotifyContent:
    data = await fetch_oembed(http, url, detected)

    title = _require(data, "title", P.SPOTIFY)
    content_type = detected.params.get("content_type")
    if content_type not in _SPOTIFY_TYPES:
        content_type = get_spotify_content_type(url) or "track"

    return SpotifyContent(
        id=detected.post_id,
        url=url,
        title=title,
        thumbnail_url=first_non_empty(data.get("thumbnail_url")),
        content_type=content_type,
        embed_html=first_non_empty(data.get("html")),
    )


# =============================================================================
# TikTok
# =============================================================================

@strategy(P.TIKTOK)
async def fetch_tiktok_video(
    http: httpx.AsyncClient, url: str, detected: PlatformDetectionResult
) -> TikTokVideo:
    data = await fetch_oembed(http, url, detected)

    author_name = _require(data, "author_name", P.TIKTOK)
    handle = (
        first_non_empty(data.get("author_unique_id"), detected.params.get("username"))
        or author_name
    )
    description = first_non_empty(data.get("title")) or ""

    return TikTokVideo(
        id=detected.post_id,
        url=url,
        title=description or None,
        thumbnail_url=first_non_empty(data.get("thumbnail_url")),
        author=SocialAuthor(
            name=author_name,
            handle=handle,
            profile_url=first_non_empty(data.get("author_url")) or f"https://www.tiktok.com/@{handle}",
        ),
        description=description,
        embed_html=first_non_empty(data.get("html")),
    )


# =============================================================================
# Vimeo
# =============================================================================

@strategy(P.VIMEO)
async def fetch_vimeo_video(
    http: httpx.AsyncClient, url: str, detected: PlatformDetectionResult
) -> VimeoVideo:
    data = await fetch_oembed(http, url, detected)

    title = _require(data, "title", P.VIMEO)
    author_name = first_non_empty(data.get("author_name")) or "Unknown"
    author_url = first_non_empty(data.get("author_url"))

    return VimeoVideo(
        id=detected.post_id,
        url=url,
        title=title,
        thumbnail_url=first_non_empty(data.get("thumbnail_url")),
        author=SocialAuthor(
            name=author_name,
            handle=_handle_from_profile_url(author_url) or author_name,
            profile_url=author_url,
        ),
        video_id=str(data.get("video_id") or detected.post_id),
        description=first_non_empty(data.get("description")),
        duration=_as_int(data.get("duration")),
        embed_html=first_non_empty(data.get("html")),
    )


# =============================================================================
# Main Fetch Function
# =============================================================================

async def _run_strategy(
    handler: StrategyFunc,
    http: httpx.AsyncClient,
    url: str,
    detected: PlatformDetectionResult,
) -> SocialPost:
    """Run a strategy, reporting payloads that fail model validation as parse errors."""
    try:
        return await handler(http, url, detected)
    except ValidationError as e:
        raise FetchError(
            FetchErrorKind.PARSE_ERROR,
            f"Unexpected {detected.platform.value} payload: {e.error_count()} invalid field(s)",
            platform=detected.platform,
        ) from e


def _for_request(post: SocialPost, url: str) -> SocialPost:
    """A cached post re-addressed to the URL of the current request."""
    if post.url == url:
        return post
    update: dict[str, Any] = {"url": url}
    if isinstance(post, GenericSocialPost):
        update["id"] = url
    return post.model_copy(update=update)


async def _fetch_uncached(
    http: httpx.AsyncClient,
    url: str,
    detected: PlatformDetectionResult | None,
) -> SocialPost:
    """Platform strategy first, OpenGraph when there is none or it fails."""
    handler = STRATEGIES.get(detected.platform) if detected else None

    if detected is not None and handler is not None:
        try:
            return await _run_strategy(handler, http, url, detected)
        except FetchError as e:
            logger.warning(
                f"{detected.platform.value} strategy failed for {url} "
                f"({e.kind.value}: {e.message}); falling back to OpenGraph"
            )

    return await fetch_generic_post(http, url, detected.platform if detected else None)


async def fetch_social_post(
    url: str,
    *,
    http: httpx.AsyncClient | None = None,
    cache: PostCache | None = None,
) -> SocialPost:
    """
    Fetch a normalized post for any URL.

    Args:
        url: Link to resolve
        http: Shared AsyncClient (a temporary one is created if omitted)
        cache: Cache to use (defaults to the process-wide post_cache)

    Returns:
        The platform-specific post, or a GenericSocialPost from OpenGraph

    Raises:
        FetchError(invalid_url): url is not an http(s) URL
        FetchError(upstream_error | parse_error): every strategy failed

    Example:
        post = await fetch_social_post("https://github.com/fastapi/fastapi")
        post.metrics.stars
    """
    if not is_valid_url(url):
        raise FetchError(FetchErrorKind.INVALID_URL, "Invalid URL format")

    url = url.strip()
    cache = post_cache if cache is None else cache
    detected = detect_platform(url)
    key = normalize_url(url)

    cached = cache.get(key)
    if cached is not None:
        logger.debug(f"Cache hit for {key}")
        return _for_request(cached, url)

    async with _client_scope(http) as client:
        post = await _fetch_uncached(client, url, detected)

    ttl = cache_ttl_for(detected.platform if detected else None)
    post = post.model_copy(update={"expires_at": post.fetched_at + timedelta(seconds=ttl)})
    cache.set(key, post, ttl)

    logger.info(f"Fetched {post.platform} post for {url}")
    return post


# =============================================================================
# Batch Fetcher
# =============================================================================

async def _fetch_batch_item(
    url: str,
    http: httpx.AsyncClient,
    cache: PostCache | None,
) -> BatchItemResult:
    """Fetch one batch item; failures are captured in the result."""
    try:
        post = await fetch_social_post(url, http=http, cache=cache)
        return BatchItemResult(url=url, success=True, data=post)
    except FetchError as e:
        return BatchItemResult(url=url, success=False, error=e.to_detail())
    except Exception as e:
        logger.exception(f"Unexpected error fetching {url}: {e}")
        detected = detect_platform(url)
        return BatchItemResult(
            url=url,
            success=False,
            error=FetchErrorDetail(
                kind=FetchErrorKind.SERVER_ERROR,
                message="Something went wrong loading this post",
                platform=detected.platform if detected else None,
            ),
        )


async def fetch_social_posts_batch(
    urls: Sequence[str],
    max_concurrent: int | None = None,
    *,
    http: httpx.AsyncClient | None = None,
    cache: PostCache | None = None,
) -> list[BatchItemResult]:
    """
    Fetch many URLs concurrently.

    All items are dispatched at once through one shared client, with at
    most `max_concurrent` upstream fetches in flight. Results come back in
    input order and one failing URL never fails the batch.

    Args:
        urls: 1..SOCIAL_BATCH_MAX_URLS links
        max_concurrent: In-flight limit (default SOCIAL_BATCH_CONCURRENCY)

    Raises:
        BatchSizeError: Batch is empty or too large (no upstream call made)
        ValueError: max_concurrent is below 1
    """
    max_size = settings.SOCIAL_BATCH_MAX_URLS
    if not urls or len(urls) > max_size:
        raise BatchSizeError(len(urls), max_size)

    if max_concurrent is None:
        max_concurrent = settings.SOCIAL_BATCH_CONCURRENCY
    elif max_concurrent < 1:
        raise ValueError(f"max_concurrent must be at least 1 (got {max_concurrent})")

    semaphore = asyncio.Semaphore(max_concurrent)

    async with _client_scope(http) as client:
        async def run(url: str) -> BatchItemResult:
            async with semaphore:
                return await _fetch_batch_item(url, client, cache)

        results = await asyncio.gather(*(run(url) for url in urls))

    failed = sum(1 for r in results if not r.success)
    logger.info(f"Batch fetched {len(results)} URLs ({failed} failed)")
    return list(results)
