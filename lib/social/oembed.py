# =============================================================================
# lib/social/oembed.py - oEmbed / API Request Builder
# =============================================================================
# Turns a detection result back into URLs:
# - reconstruct_url: canonical content URL from (platform, post_id[, params])
# - build_oembed_url: the request target a fetch strategy calls (provider
#   oEmbed endpoint, or the REST API for GitHub repos)
#
# reconstruct_url is the inverse of detect_platform: detecting the URL it
# returns yields the same (platform, post_id) pair.
# =============================================================================

from __future__ import annotations

import re
from urllib.parse import urlencode

from core.models.social import SupportedPlatform
from lib.social.platform_detector import P


# =============================================================================
# Endpoints
# =============================================================================

OEMBED_ENDPOINTS: dict[SupportedPlatform, str] = {
    P.TWITTER: "https://publish.twitter.com/oembed",
    P.YOUTUBE: "https://www.youtube.com/oembed",
    P.INSTAGRAM: "https://graph.facebook.com/v18.0/instagram_oembed",
    P.VIMEO: "https://vimeo.com/api/oembed.json",
    P.SPOTIFY: "https://open.spotify.com/oembed",
    P.SOUNDCLOUD: "https://soundcloud.com/oembed",
    P.REDDIT: "https://www.reddit.com/oembed",
    P.TIKTOK: "https://www.tiktok.com/oembed",
    P.FACEBOOK: "https://www.facebook.com/plugins/post/oembed.json",
}

# Meta's oEmbed endpoints reject anonymous calls
OEMBED_TOKEN_REQUIRED = frozenset({P.INSTAGRAM, P.FACEBOOK})

GITHUB_API_BASE = "https://api.github.com"

# Platforms GET /social/post/{platform}/{postId} can rebuild a URL for
RECONSTRUCTABLE_PLATFORMS = frozenset({
    P.TWITTER, P.YOUTUBE, P.INSTAGRAM, P.TIKTOK, P.REDDIT,
    P.GITHUB, P.SPOTIFY, P.VIMEO, P.THREADS, P.BLUESKY,
})

_SAFE_ID = re.compile(r"^[\w.-]+$")
_SAFE_REPO_PATH = re.compile(r"^[\w-]+/[\w.-]+$")


def get_oembed_endpoint(platform: SupportedPlatform) -> str | None:
    """Return the oEmbed endpoint for a platform, or None."""
    return OEMBED_ENDPOINTS.get(platform)


# =============================================================================
# Canonical URL Reconstruction
# =============================================================================

def reconstruct_url(
    platform: SupportedPlatform,
    post_id: str,
    params: dict[str, str] | None = None,
) -> str | None:
    """
    Rebuild a canonical content URL from a platform and post id.

    Params from a detection result refine the template (Spotify content
    type, Twitter username, YouTube Shorts, ...). Without params the most
    generic template for the platform is used.

    Args:
        platform: Detected or requested platform
        post_id: Content identifier ("owner/repo" for GitHub repos)
        params: Optional auxiliary params from PlatformDetectionResult

    Returns:
        Canonical URL, or None if the platform has no template or the id
        contains characters no platform uses.

    Example:
        reconstruct_url(SupportedPlatform.YOUTUBE, "dQw4w9WgXcQ")
        # "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    """
    params = params or {}
    post_id = (post_id or "").strip()

    if platform == P.GITHUB:
        if _SAFE_REPO_PATH.match(post_id):
            return f"https://github.com/{post_id}"
        owner = params.get("owner", "")
        if params.get("content_type") == "gist" and _SAFE_ID.match(post_id) and _SAFE_ID.match(owner):
            return f"https://gist.github.com/{owner}/{post_id}"
        return None

    if not _SAFE_ID.match(post_id):
        return None

    if platform == P.TWITTER:
        username = params.get("username")
        if username and username.lower() != "i":
            return f"https://twitter.com/{username}/status/{post_id}"
        return f"https://twitter.com/i/web/status/{post_id}"

    if platform == P.YOUTUBE:
        if params.get("is_short") == "true":
            return f"https://www.youtube.com/shorts/{post_id}"
        return f"https://www.youtube.com/watch?v={post_id}"

    if platform == P.INSTAGRAM:
        if "storyId" in params and "username" in params:
            return f"https://www.instagram.com/stories/{params['username']}/{post_id}/"
        return f"https://www.instagram.com/p/{post_id}/"

    if platform == P.TIKTOK:
        if not post_id.isdigit():
            return f"https://vm.tiktok.com/{post_id}"
        username = params.get("username", "user")
        return f"https://www.tiktok.com/@{username}/video/{post_id}"

    if platform == P.REDDIT:
        subreddit = params.get("subreddit")
        if subreddit and "shortId" in params:
            return f"https://www.reddit.com/r/{subreddit}/s/{post_id}"
        if subreddit:
            return f"https://www.reddit.com/r/{subreddit}/comments/{post_id}"
        return f"https://www.reddit.com/comments/{post_id}"

    if platform == P.SPOTIFY:
        content_type = params.get("content_type", "track")
        return f"https://open.spotify.com/{content_type}/{post_id}"

    if platform == P.VIMEO:
        return f"https://vimeo.com/{post_id}"

    if platform == P.THREADS:
        username = params.get("username")
        if username:
            return f"https://www.threads.net/@{username}/post/{post_id}"
        return f"https://www.threads.net/t/{post_id}"

    if platform == P.BLUESKY:
        handle = params.get("handle", "user")
        return f"https://bsky.app/profile/{handle}/post/{post_id}"

    return None


# =============================================================================
# Request Targets
# =============================================================================

def build_github_api_url(post_id: str) -> str | None:
    """REST API URL for an "owner/repo" id, or None."""
    if not _SAFE_REPO_PATH.match(post_id or ""):
        return None
    return f"{GITHUB_API_BASE}/repos/{post_id}"


def build_oembed_url(
    platform: SupportedPlatform,
    post_id: str,
    params: dict[str, str] | None = None,
    *,
    content_url: str | None = None,
    access_token: str | None = None,
    max_width: int | None = None,
    max_height: int | None = None,
    theme: str | None = None,
) -> str | None:
    """
    Build the request URL a fetch strategy should call.

    For oEmbed providers this is "{endpoint}?url={content}&format=json";
    for GitHub repositories it is the REST API URL. Platforms with no public
    oEmbed or API (Bluesky, Threads, LinkedIn, ...) return None, which sends
    the caller to the OpenGraph fallback.

    Args:
        platform: Detected platform
        post_id: Content identifier
        params: Auxiliary params from detection
        content_url: URL to embed; defaults to reconstruct_url(...)
        access_token: Appended for providers in OEMBED_TOKEN_REQUIRED
        max_width / max_height / theme: Optional oEmbed hints

    Example:
        build_oembed_url(SupportedPlatform.YOUTUBE, "dQw4w9WgXcQ")
        # "https://www.youtube.com/oembed?url=https%3A%2F%2Fwww.youtube.com%2F..."
    """
    params = params or {}

    if platform == P.GITHUB:
        if params.get("content_type", "repo") != "repo":
            return None
        return build_github_api_url(post_id)

    endpoint = get_oembed_endpoint(platform)
    if not endpoint:
        return None

    target = content_url or reconstruct_url(platform, post_id, params)
    if not target:
        return None

    query: dict[str, str] = {"url": target, "format": "json"}
    if max_width:
        query["maxwidth"] = str(max_width)
    if max_height:
        query["maxheight"] = str(max_height)
    if theme:
        query["theme"] = theme

    if platform == P.TWITTER:
        query["omit_script"] = "true"
        query["hide_thread"] = "false"

    if platform in OEMBED_TOKEN_REQUIRED and access_token:
        query["access_token"] = access_token

    return f"{endpoint}?{urlencode(query)}"
