# =============================================================================
# core/models/social.py - Social Post Schemas
# =============================================================================
# These models define the contract for link resolution:
# - SupportedPlatform: Closed set of platforms the detector knows about
# - PlatformDetectionResult: What the detector extracted from a URL
# - SocialPost: Normalized post record, one variant per fetch strategy
# - FetchErrorDetail / BatchItemResult: Per-item outcomes of a batch
#
# JSON uses camelCase keys (postId, fetchedAt) to match what the web client
# already consumes. Python code always uses the snake_case attribute names.
# =============================================================================

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Timezone-aware "now" used for fetch timestamps."""
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model that serializes with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Enums
# =============================================================================

class SupportedPlatform(str, Enum):
    """
    Platforms the detector can classify.

    UNKNOWN is used for links that matched no rule and were handled by the
    generic OpenGraph scraper.
    """
    TWITTER = "twitter"
    YOUTUBE = "youtube"
    INSTAGRAM = "instagram"
    LINKEDIN = "linkedin"
    TIKTOK = "tiktok"
    THREADS = "threads"
    BLUESKY = "bluesky"
    FACEBOOK = "facebook"
    REDDIT = "reddit"
    PINTEREST = "pinterest"
    SPOTIFY = "spotify"
    GITHUB = "github"
    MEDIUM = "medium"
    SUBSTACK = "substack"
    VIMEO = "vimeo"
    TWITCH = "twitch"
    SOUNDCLOUD = "soundcloud"
    MASTODON = "mastodon"
    UNKNOWN = "unknown"


class FetchErrorKind(str, Enum):
    """
    Error taxonomy for link resolution.

    - invalid_url: Input is not an http(s) URL
    - unsupported_platform: Platform has no handler for the requested operation
    - upstream_error: Network failure, timeout or non-2xx from the provider
    - parse_error: Provider answered but the payload had an unexpected shape
    - server_error: Unexpected internal fault
    """
    INVALID_URL = "invalid_url"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    UPSTREAM_ERROR = "upstream_error"
    PARSE_ERROR = "parse_error"
    SERVER_ERROR = "server_error"


# =============================================================================
# Detection
# =============================================================================

class PlatformDetectionResult(CamelModel):
    """
    Result of classifying a URL.

    Recomputed per request and never persisted.

    Example:
        {
            "platform": "youtube",
            "postId": "dQw4w9WgXcQ",
            "params": {"videoId": "dQw4w9WgXcQ", "is_short": "false"}
        }
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    platform: SupportedPlatform
    post_id: str = Field(..., description="Canonical content identifier")
    params: dict[str, str] = Field(
        default_factory=dict,
        description="Named pattern captures plus derived auxiliary parameters"
    )


# =============================================================================
# Shared Sub-records
# =============================================================================

class SocialAuthor(CamelModel):
    """Author of a post, as much of it as the provider exposes."""
    name: str
    handle: str
    profile_url: str | None = None
    avatar: str | None = None
    verified: bool = False


class SocialMedia(CamelModel):
    """One media attachment (image, video, audio)."""
    type: Literal["image", "video", "gif", "audio", "document"] = "image"
    url: str
    thumbnail_url: str | None = None
    width: int | None = None
    height: int | None = None


class SocialMetrics(CamelModel):
    """Engagement counters. Most public endpoints expose none of these."""
    likes: int | None = None
    comments: int | None = None
    shares: int | None = None
    views: int | None = None
    stars: int | None = None
    forks: int | None = None
    watchers: int | None = None
    issues: int | None = None


class OpenGraphData(CamelModel):
    """Link preview metadata scraped from a page's meta tags."""
    title: str | None = None
    description: str | None = None
    image: str | None = None
    image_width: int | None = None
    image_height: int | None = None
    site_name: str | None = None
    type: str | None = None
    url: str | None = None
    author: str | None = None
    published_time: str | None = None
    twitter_card: str | None = None
    twitter_site: str | None = None
    twitter_creator: str | None = None

    @property
    def is_empty(self) -> bool:
        """True when the page exposed none of the preview fields."""
        return not (self.title or self.description or self.image)


# =============================================================================
# Post Variants
# =============================================================================

class BaseSocialPost(CamelModel):
    """Fields every normalized post carries."""
    id: str
    url: str = Field(..., description="The URL the caller asked for")
    title: str | None = None
    thumbnail_url: str | None = None
    author: SocialAuthor | None = None
    metrics: SocialMetrics = Field(default_factory=SocialMetrics)
    fetched_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime | None = None


class TwitterPost(BaseSocialPost):
    platform: Literal["twitter"] = "twitter"
    text: str = ""
    embed_html: str | None = None


class YouTubeVideo(BaseSocialPost):
    platform: Literal["youtube"] = "youtube"
    video_id: str
    thumbnails: dict[str, str] = Field(default_factory=dict)
    is_short: bool = False
    embed_html: str | None = None


class InstagramPost(BaseSocialPost):
    platform: Literal["instagram"] = "instagram"
    caption: str = ""
    media: list[SocialMedia] = Field(default_factory=list)
    post_type: Literal["image", "video", "carousel", "reel"] = "image"


class RedditPost(BaseSocialPost):
    platform: Literal["reddit"] = "reddit"
    subreddit: str
    is_comment: bool = False
    permalink: str
    embed_html: str | None = None


class GitHubRepo(BaseSocialPost):
    platform: Literal["github"] = "github"
    content_type: Literal["repo", "gist", "issue", "pull", "discussion"] = "repo"
    name: str
    full_name: str
    description: str | None = None
    language: str | None = None
    topics: list[str] = Field(default_factory=list)
    license: str | None = None
    is_private: bool = False
    default_branch: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SpotifyContent(BaseSocialPost):
    platform: Literal["spotify"] = "spotify"
    content_type: Literal[
        "track", "album", "playlist", "episode", "show", "artist"
    ] = "track"
    embed_html: str | None = None


class TikTokVideo(BaseSocialPost):
    platform: Literal["tiktok"] = "tiktok"
    description: str = ""
    embed_html: str | None = None


class VimeoVideo(BaseSocialPost):
    platform: Literal["vimeo"] = "vimeo"
    video_id: str
    description: str | None = None
    duration: int | None = Field(default=None, description="Seconds")
    embed_html: str | None = None


class GenericSocialPost(BaseSocialPost):
    """
    OpenGraph fallback record.

    `platform` is always "unknown" because the data came from generic page
    metadata. When a platform was detected but its strategy failed (or it
    has none), that platform is kept in `source_platform`.
    """
    platform: Literal["unknown"] = "unknown"
    source_platform: SupportedPlatform | None = None
    open_graph: OpenGraphData = Field(default_factory=OpenGraphData)


SocialPost = Annotated[
    Union[
        TwitterPost,
        YouTubeVideo,
        InstagramPost,
        RedditPost,
        GitHubRepo,
        SpotifyContent,
        TikTokVideo,
        VimeoVideo,
        GenericSocialPost,
    ],
    Field(discriminator="platform"),
]


# =============================================================================
# Errors & Batch Results
# =============================================================================

class FetchErrorDetail(CamelModel):
    """Serializable form of a fetch failure."""
    kind: FetchErrorKind
    message: str
    platform: SupportedPlatform | None = None
    status_code: int | None = None


class BatchItemResult(CamelModel):
    """Outcome for one URL in a batch. Exactly one of data/error is set."""
    url: str
    success: bool
    data: SocialPost | None = None
    error: FetchErrorDetail | None = None


# =============================================================================
# API Request/Response Models
# =============================================================================

class UrlRequest(CamelModel):
    """Body for endpoints that take a single link."""
    url: str = Field(..., examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"])


class BatchRequest(CamelModel):
    """Body for the batch endpoint."""
    urls: list[str] = Field(
        ...,
        examples=[["https://github.com/fastapi/fastapi", "https://youtu.be/dQw4w9WgXcQ"]],
    )


class ResolveResponse(CamelModel):
    """
    Result of resolving a link without fetching it.

    Supported:   {"supported": true, "platform": ..., "postId": ..., "params": ..., "url": ...}
    Unsupported: {"supported": false, "fallback": "opengraph", "url": ...}
    """
    supported: bool
    url: str
    platform: SupportedPlatform | None = None
    post_id: str | None = None
    params: dict[str, str] | None = None
    fallback: Literal["opengraph"] | None = None


class BatchResponse(CamelModel):
    """One result per input URL, in input order."""
    results: list[BatchItemResult]


class PlatformInfo(CamelModel):
    """Display info for a platform."""
    platform: SupportedPlatform
    name: str
    color: str
    has_oembed: bool
