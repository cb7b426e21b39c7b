# =============================================================================
# lib/social/platform_detector.py - Social Platform Detection
# =============================================================================
# Classifies a raw URL into a SupportedPlatform and extracts the canonical
# content identifier.
#
# Rules are checked platform by platform in PLATFORM_PATTERNS order and the
# first match wins. Within a platform, specific path rules are listed
# before looser ones for the same host (Reddit's bare "/{id}" rule is last).
# Mastodon's host-agnostic rules are checked after every named platform.
#
# Everything here is pure: no network access, same input -> same output.
#
# Usage:
#   from lib.social.platform_detector import detect_platform
#   result = detect_platform("https://youtu.be/dQw4w9WgXcQ")
#   result.platform  # SupportedPlatform.YOUTUBE
#   result.post_id   # "dQw4w9WgXcQ"
# =============================================================================

from __future__ import annotations

import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from core.models.social import PlatformDetectionResult, SupportedPlatform


P = SupportedPlatform
_FLAGS = re.IGNORECASE


def _compile(*patterns: str) -> list[re.Pattern[str]]:
    return [re.compile(p, _FLAGS) for p in patterns]


# =============================================================================
# Platform URL Patterns
# =============================================================================

PLATFORM_PATTERNS: dict[SupportedPlatform, list[re.Pattern[str]]] = {
    P.TWITTER: _compile(
        r"^https?://(?:www\.|mobile\.)?(?:twitter|x)\.com/(?P<username>\w+)/status/(?P<postId>\d+)",
        r"^https?://(?:www\.)?(?:twitter|x)\.com/i/web/status/(?P<postId>\d+)",
    ),
    P.YOUTUBE: _compile(
        r"^https?://(?:www\.|m\.)?youtube\.com/watch\?(?:[^#]*&)?v=(?P<videoId>[\w-]+)",
        r"^https?://youtu\.be/(?P<videoId>[\w-]+)",
        r"^https?://(?:www\.)?youtube\.com/shorts/(?P<videoId>[\w-]+)",
        r"^https?://(?:www\.)?youtube\.com/embed/(?P<videoId>[\w-]+)",
        r"^https?://(?:www\.)?youtube\.com/v/(?P<videoId>[\w-]+)",
    ),
    P.INSTAGRAM: _compile(
        r"^https?://(?:www\.)?instagram\.com/p/(?P<postId>[\w-]+)/?(?:\?.*)?$",
        r"^https?://(?:www\.)?instagram\.com/reels?/(?P<postId>[\w-]+)/?(?:\?.*)?$",
        r"^https?://(?:www\.)?instagram\.com/tv/(?P<postId>[\w-]+)/?(?:\?.*)?$",
        r"^https?://(?:www\.)?instagram\.com/stories/(?P<username>[\w.]+)/(?P<storyId>\d+)/?(?:\?.*)?$",
    ),
    P.LINKEDIN: _compile(
        r"^https?://(?:www\.)?linkedin\.com/posts/(?P<slug>[\w-]+)",
        r"^https?://(?:www\.)?linkedin\.com/feed/update/urn:li:activity:(?P<activityId>\d+)",
        r"^https?://(?:www\.)?linkedin\.com/feed/update/urn:li:share:(?P<shareId>\d+)",
        r"^https?://(?:www\.)?linkedin\.com/pulse/(?P<articleSlug>[\w-]+)",
        r"^https?://(?:www\.)?linkedin\.com/embed/feed/update/urn:li:share:(?P<shareId>\d+)",
    ),
    P.TIKTOK: _compile(
        r"^https?://(?:www\.)?tiktok\.com/@(?P<username>[\w.]+)/video/(?P<videoId>\d+)",
        r"^https?://vm\.tiktok\.com/(?P<shortCode>\w+)",
        r"^https?://(?:www\.)?tiktok\.com/t/(?P<shortCode>\w+)",
        r"^https?://m\.tiktok\.com/v/(?P<videoId>\d+)",
    ),
    P.THREADS: _compile(
        r"^https?://(?:www\.)?threads\.net/@(?P<username>[\w.]+)/post/(?P<postId>[\w-]+)",
        r"^https?://(?:www\.)?threads\.net/t/(?P<postId>[\w-]+)",
    ),
    P.BLUESKY: _compile(
        r"^https?://(?:staging\.)?bsky\.app/profile/(?P<handle>[\w.-]+)/post/(?P<postId>\w+)",
    ),
    P.FACEBOOK: _compile(
        r"^https?://(?:www\.)?facebook\.com/(?P<username>[\w.]+)/posts/(?P<postId>\d+)",
        r"^https?://(?:www\.)?facebook\.com/(?P<username>[\w.]+)/videos/(?P<videoId>\d+)",
        r"^https?://(?:www\.)?facebook\.com/watch/?\?v=(?P<videoId>\d+)",
        r"^https?://(?:www\.)?facebook\.com/photo\.php\?fbid=(?P<photoId>\d+)",
        r"^https?://fb\.watch/(?P<videoId>[\w-]+)",
        r"^https?://(?:www\.)?facebook\.com/reel/(?P<reelId>\d+)",
    ),
    P.REDDIT: _compile(
        r"^https?://(?:www\.|old\.)?reddit\.com/r/(?P<subreddit>\w+)/comments/(?P<postId>\w+)",
        r"^https?://(?:www\.)?reddit\.com/r/(?P<subreddit>\w+)/s/(?P<shortId>\w+)",
        r"^https?://(?:www\.|old\.)?reddit\.com/comments/(?P<postId>\w+)",
        r"^https?://redd\.it/(?P<postId>\w+)",
        r"^https?://(?:www\.)?reddit\.com/(?P<postId>\w+)/?$",
    ),
    P.PINTEREST: _compile(
        r"^https?://(?:www\.)?pinterest\.(?:com|de|co\.uk|ca|fr|it|es|at|ch)/pin/(?P<pinId>\d+)",
        r"^https?://pin\.it/(?P<shortId>\w+)",
    ),
    P.SPOTIFY: _compile(
        r"^https?://open\.spotify\.com/(?:intl-\w+/)?(?P<contentType>track|album|playlist|episode|show|artist)/(?P<contentId>\w+)",
        r"^https?://spotify\.link/(?P<shortId>\w+)",
    ),
    P.GITHUB: _compile(
        r"^https?://(?:www\.)?github\.com/(?P<owner>[\w-]+)/(?P<repo>[\w.-]+)/(?P<type>issues|pull|discussions)/(?P<number>\d+)",
        r"^https?://(?:www\.)?github\.com/(?P<owner>[\w-]+)/(?P<repo>[\w.-]+?)/?$",
        r"^https?://gist\.github\.com/(?P<owner>[\w-]+)/(?P<gistId>\w+)",
    ),
    P.MEDIUM: _compile(
        r"^https?://(?:www\.)?medium\.com/@(?P<username>[\w-]+)/(?P<slug>[\w-]+)-(?P<postId>\w+)",
        r"^https?://(?P<publication>[\w-]+)\.medium\.com/(?P<slug>[\w-]+)-(?P<postId>\w+)",
        r"^https?://(?:www\.)?medium\.com/(?P<publication>[\w-]+)/(?P<slug>[\w-]+)-(?P<postId>\w+)",
    ),
    P.SUBSTACK: _compile(
        r"^https?://(?P<publication>[\w-]+)\.substack\.com/p/(?P<slug>[\w-]+)",
        r"^https?://(?:www\.)?substack\.com/@(?P<username>[\w-]+)/p/(?P<slug>[\w-]+)",
    ),
    P.VIMEO: _compile(
        r"^https?://(?:www\.)?vimeo\.com/(?P<videoId>\d+)",
        r"^https?://(?:www\.)?vimeo\.com/channels/[\w-]+/(?P<videoId>\d+)",
        r"^https?://(?:www\.)?vimeo\.com/groups/[\w-]+/videos/(?P<videoId>\d+)",
        r"^https?://player\.vimeo\.com/video/(?P<videoId>\d+)",
    ),
    P.TWITCH: _compile(
        r"^https?://(?:www\.)?twitch\.tv/(?P<channel>\w+)/clip/(?P<clipId>[\w-]+)",
        r"^https?://clips\.twitch\.tv/(?P<clipId>[\w-]+)",
        r"^https?://(?:www\.)?twitch\.tv/videos/(?P<videoId>\d+)",
    ),
    P.SOUNDCLOUD: _compile(
        r"^https?://(?:www\.)?soundcloud\.com/(?P<artist>[\w-]+)/sets/(?P<playlist>[\w-]+)",
        r"^https?://(?:www\.)?soundcloud\.com/(?P<artist>[\w-]+)/(?P<track>[\w-]+)",
        r"^https?://on\.soundcloud\.com/(?P<shortId>\w+)",
    ),
    P.MASTODON: _compile(
        r"^https?://(?P<instance>[\w.-]+)/@(?P<username>\w+)/(?P<postId>\d+)",
        r"^https?://(?P<instance>[\w.-]+)/users/(?P<username>\w+)/statuses/(?P<postId>\d+)",
    ),
}

# Fallback for well-known Mastodon hosts whose URLs the generic rules miss
KNOWN_MASTODON_INSTANCES = frozenset({
    "mastodon.social",
    "mastodon.online",
    "mas.to",
    "fosstodon.org",
    "infosec.exchange",
    "hachyderm.io",
    "techhub.social",
    "mstdn.social",
    "universeodon.com",
    "mastodon.world",
    "c.im",
    "masto.ai",
})

# Capture group that holds the post id, tried in order, per platform
_POST_ID_GROUPS: dict[SupportedPlatform, tuple[str, ...]] = {
    P.TWITTER: ("postId",),
    P.YOUTUBE: ("videoId",),
    P.INSTAGRAM: ("postId", "storyId"),
    P.LINKEDIN: ("activityId", "shareId", "slug", "articleSlug"),
    P.TIKTOK: ("videoId", "shortCode"),
    P.THREADS: ("postId",),
    P.BLUESKY: ("postId",),
    P.FACEBOOK: ("postId", "videoId", "photoId", "reelId"),
    P.REDDIT: ("postId", "shortId"),
    P.PINTEREST: ("pinId", "shortId"),
    P.SPOTIFY: ("contentId", "shortId"),
    P.MEDIUM: ("postId", "slug"),
    P.SUBSTACK: ("slug",),
    P.VIMEO: ("videoId",),
    P.TWITCH: ("clipId", "videoId"),
    P.SOUNDCLOUD: ("track", "playlist", "shortId"),
    P.MASTODON: ("postId",),
}

TRACKING_PARAMS = frozenset({
    "utm_source", "utm_medium", "utm_campaign", "utm_content", "utm_term",
    "ref", "ref_src", "ref_url",
})

# Share tokens on platform links; ordinary pages use them for real queries (?s=search)
SOCIAL_SHARE_PARAMS = frozenset({"s", "t", "si"})


# =============================================================================
# Validation
# =============================================================================

def is_valid_url(url: object) -> bool:
    """
    Check that a value is an absolute http(s) URL with a host.

    Fails closed: anything that can't be parsed returns False instead of
    raising.

    Example:
        is_valid_url("https://github.com/fastapi/fastapi")  # True
        is_valid_url("not a url")                            # False
    """
    if not isinstance(url, str):
        return False
    candidate = url.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return False
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(hostname)


# =============================================================================
# Detection
# =============================================================================

def detect_platform(url: str) -> PlatformDetectionResult | None:
    """
    Detect which platform a URL belongs to.

    Args:
        url: Raw URL string (surrounding whitespace is ignored)

    Returns:
        PlatformDetectionResult, or None when no rule matches. None is not
        an error: callers fall back to generic OpenGraph handling.

    Example:
        detect_platform("https://github.com/foo/bar")
        # platform=github, post_id="foo/bar",
        # params={"owner": "foo", "repo": "bar", "content_type": "repo"}
    """
    if not is_valid_url(url):
        return None
    normalized = url.strip()

    for platform, patterns in PLATFORM_PATTERNS.items():
        for pattern in patterns:
            match = pattern.match(normalized)
            if match:
                groups = {k: v for k, v in match.groupdict().items() if v}
                return _build_result(platform, groups, normalized)

    return _detect_mastodon_instance(normalized)


def is_social_media_url(url: str) -> bool:
    """True when the URL matches a known platform rule."""
    return detect_platform(url) is not None


def _build_result(
    platform: SupportedPlatform,
    groups: dict[str, str],
    url: str,
) -> PlatformDetectionResult:
    """Derive the post id and auxiliary params from the matched groups."""
    params = dict(groups)

    if platform == P.GITHUB:
        if "repo" in groups:
            post_id = f"{groups['owner']}/{groups['repo']}"
        else:
            post_id = groups.get("gistId", "")
        params["content_type"] = get_github_content_type(url) or "repo"
    else:
        post_id = next(
            (groups[name] for name in _POST_ID_GROUPS.get(platform, ()) if name in groups),
            "",
        )

    if platform == P.SPOTIFY:
        params["content_type"] = (
            groups.get("contentType", "").lower() or get_spotify_content_type(url) or "track"
        )
        params.pop("contentType", None)
    elif platform == P.YOUTUBE:
        params["is_short"] = "true" if is_youtube_short(url) else "false"

    return PlatformDetectionResult(platform=platform, post_id=post_id, params=params)


def _detect_mastodon_instance(url: str) -> PlatformDetectionResult | None:
    """Detect posts on well-known Mastodon hosts."""
    parts = urlsplit(url)
    hostname = (parts.hostname or "").lower()
    if hostname not in KNOWN_MASTODON_INSTANCES:
        return None

    match = re.search(r"/@(\w+)/(\d+)", parts.path)
    if not match:
        return None

    return PlatformDetectionResult(
        platform=P.MASTODON,
        post_id=match.group(2),
        params={
            "instance": hostname,
            "username": match.group(1),
            "postId": match.group(2),
        },
    )


# =============================================================================
# Content-type Helpers
# =============================================================================

_GITHUB_REPO_URL = re.compile(r"^https?://(?:www\.)?github\.com/[\w-]+/[\w.-]+/?$", _FLAGS)


def get_spotify_content_type(url: str) -> str | None:
    """Return track/album/playlist/episode/show/artist, or None."""
    for content_type in ("track", "album", "playlist", "episode", "show", "artist"):
        if f"/{content_type}/" in url:
            return content_type
    return None


def get_github_content_type(url: str) -> str | None:
    """Return repo/gist/issue/pull/discussion, or None."""
    if "gist.github.com" in url:
        return "gist"
    if "/issues/" in url:
        return "issue"
    if "/pull/" in url:
        return "pull"
    if "/discussions/" in url:
        return "discussion"
    if _GITHUB_REPO_URL.match(url.strip()):
        return "repo"
    return None


def is_youtube_short(url: str) -> bool:
    """True for youtube.com/shorts/ URLs."""
    return "/shorts/" in url


# =============================================================================
# Canonical URLs
# =============================================================================

def normalize_url(url: str) -> str:
    """
    Normalize a URL to the canonical form used as cache key.

    - Strips surrounding whitespace
    - Removes tracking query parameters (utm_*, ref, ...)
    - Removes share tokens (s, t, si) from recognized platform links only
    - Rewrites x.com to twitter.com

    Unparsable input is returned unchanged (after stripping).

    Example:
        normalize_url("https://x.com/jack/status/20?s=20")
        # "https://twitter.com/jack/status/20"
    """
    candidate = url.strip()
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return candidate

    dropped = TRACKING_PARAMS
    if is_social_media_url(candidate):
        dropped = TRACKING_PARAMS | SOCIAL_SHARE_PARAMS
    query = urlencode(
        [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True)
         if k not in dropped]
    )

    netloc = parts.netloc
    hostname = (parts.hostname or "").lower()
    if hostname in ("x.com", "www.x.com", "mobile.x.com"):
        netloc = netloc.lower().replace("x.com", "twitter.com", 1)

    return urlunsplit((parts.scheme.lower(), netloc, parts.path, query, parts.fragment))


# =============================================================================
# Display Info
# =============================================================================

PLATFORM_INFO: dict[SupportedPlatform, tuple[str, str]] = {
    P.TWITTER: ("X (Twitter)", "#000000"),
    P.YOUTUBE: ("YouTube", "#FF0000"),
    P.INSTAGRAM: ("Instagram", "#E4405F"),
    P.LINKEDIN: ("LinkedIn", "#0A66C2"),
    P.TIKTOK: ("TikTok", "#000000"),
    P.THREADS: ("Threads", "#000000"),
    P.BLUESKY: ("Bluesky", "#0085FF"),
    P.FACEBOOK: ("Facebook", "#1877F2"),
    P.REDDIT: ("Reddit", "#FF4500"),
    P.PINTEREST: ("Pinterest", "#E60023"),
    P.SPOTIFY: ("Spotify", "#1DB954"),
    P.GITHUB: ("GitHub", "#333333"),
    P.MEDIUM: ("Medium", "#000000"),
    P.SUBSTACK: ("Substack", "#FF6719"),
    P.VIMEO: ("Vimeo", "#1AB7EA"),
    P.TWITCH: ("Twitch", "#9146FF"),
    P.SOUNDCLOUD: ("SoundCloud", "#FF5500"),
    P.MASTODON: ("Mastodon", "#6364FF"),
    P.UNKNOWN: ("Link", "#6B7280"),
}


def get_platform_info(platform: SupportedPlatform) -> tuple[str, str]:
    """Return (display name, brand colour) for a platform."""
    return PLATFORM_INFO.get(platform, PLATFORM_INFO[P.UNKNOWN])
