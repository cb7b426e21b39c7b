# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - social.py: Platform detection, normalized posts, errors, API bodies
#
# These models define the "contract" between API and clients.
# =============================================================================

from .social import (
    BaseSocialPost,
    BatchItemResult,
    BatchRequest,
    BatchResponse,
    CamelModel,
    FetchErrorDetail,
    FetchErrorKind,
    GenericSocialPost,
    GitHubRepo,
    InstagramPost,
    OpenGraphData,
    PlatformDetectionResult,
    PlatformInfo,
    RedditPost,
    ResolveResponse,
    SocialAuthor,
    SocialMedia,
    SocialMetrics,
    SocialPost,
    SpotifyContent,
    SupportedPlatform,
    TikTokVideo,
    TwitterPost,
    UrlRequest,
    VimeoVideo,
    YouTubeVideo,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Enums
    "SupportedPlatform",
    "FetchErrorKind",
    # Detection
    "PlatformDetectionResult",
    # Posts
    "BaseSocialPost",
    "CamelModel",
    "GenericSocialPost",
    "GitHubRepo",
    "InstagramPost",
    "OpenGraphData",
    "RedditPost",
    "SocialAuthor",
    "SocialMedia",
    "SocialMetrics",
    "SocialPost",
    "SpotifyContent",
    "TikTokVideo",
    "TwitterPost",
    "VimeoVideo",
    "YouTubeVideo",
    # Results
    "BatchItemResult",
    "FetchErrorDetail",
    # API bodies
    "BatchRequest",
    "BatchResponse",
    "PlatformInfo",
    "ResolveResponse",
    "UrlRequest",
]
