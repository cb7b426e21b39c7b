# =============================================================================
# lib/social/ - Social Link Resolution
# =============================================================================
# Turns arbitrary links into normalized social post records:
# - platform_detector.py: URL -> (platform, post id, params)
# - oembed.py: (platform, post id) -> canonical URL / oEmbed / API URL
# - opengraph.py: HTML -> OpenGraphData
# - fetchers.py: Fetch strategies, OpenGraph fallback, batch fan-out
# - cache.py: In-process TTL cache of fetched posts
# - errors.py: FetchError / BatchSizeError
#
# Nothing here imports FastAPI; the API layer lives in app/routers/social.py.
# =============================================================================

from lib.social.cache import PostCache, cache_ttl_for, post_cache
from lib.social.errors import BatchSizeError, FetchError
from lib.social.fetchers import (
    STRATEGIES,
    build_http_client,
    fetch_generic_post,
    fetch_oembed,
    fetch_social_post,
    fetch_social_posts_batch,
    scrape_open_graph,
)
from lib.social.oembed import build_oembed_url, reconstruct_url
from lib.social.opengraph import parse_open_graph
from lib.social.platform_detector import (
    detect_platform,
    get_platform_info,
    is_social_media_url,
    is_valid_url,
    normalize_url,
)

__all__ = [
    # Detection
    "detect_platform",
    "is_valid_url",
    "is_social_media_url",
    "normalize_url",
    "get_platform_info",
    # URL building
    "reconstruct_url",
    "build_oembed_url",
    # Fetching
    "STRATEGIES",
    "build_http_client",
    "fetch_social_post",
    "fetch_social_posts_batch",
    "fetch_oembed",
    "scrape_open_graph",
    "fetch_generic_post",
    "parse_open_graph",
    # Cache
    "PostCache",
    "post_cache",
    "cache_ttl_for",
    # Errors
    "FetchError",
    "BatchSizeError",
]
