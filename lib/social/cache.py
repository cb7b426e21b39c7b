# =============================================================================
# lib/social/cache.py - Fetched Post Cache
# =============================================================================
# In-process TTL cache for normalized posts, keyed by canonical URL.
#
# Expiry is lazy: an entry is only checked (and dropped) when it is read.
# Entries are immutable; storing a refetched post replaces the entry.
# Nothing survives a process restart - this only saves upstream calls.
#
# Usage:
#   from lib.social.cache import post_cache
#   post = post_cache.get("https://twitter.com/jack/status/20")
#   post_cache.set(key, post, ttl=900)
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from app.config import settings
from core.models.social import SupportedPlatform

logger = logging.getLogger(__name__)

P = SupportedPlatform

# Per-platform freshness, in seconds. Fast-moving feeds expire sooner.
PLATFORM_CACHE_TTL: dict[SupportedPlatform, int] = {
    P.TWITTER: 15 * 60,
    P.INSTAGRAM: 30 * 60,
    P.LINKEDIN: 60 * 60,
    P.TIKTOK: 15 * 60,
    P.THREADS: 30 * 60,
    P.BLUESKY: 15 * 60,
    P.FACEBOOK: 30 * 60,
    P.YOUTUBE: 4 * 60 * 60,
    P.VIMEO: 24 * 60 * 60,
    P.SPOTIFY: 24 * 60 * 60,
    P.GITHUB: 60 * 60,
    P.REDDIT: 15 * 60,
    P.PINTEREST: 60 * 60,
    P.MEDIUM: 4 * 60 * 60,
    P.SUBSTACK: 4 * 60 * 60,
    P.TWITCH: 30 * 60,
    P.SOUNDCLOUD: 60 * 60,
    P.MASTODON: 15 * 60,
}


def cache_ttl_for(platform: SupportedPlatform | None) -> int:
    """TTL for a platform, falling back to SOCIAL_CACHE_TTL_SECONDS."""
    if platform is None:
        return settings.SOCIAL_CACHE_TTL_SECONDS
    return PLATFORM_CACHE_TTL.get(platform, settings.SOCIAL_CACHE_TTL_SECONDS)


@dataclass(frozen=True)
class CacheEntry:
    """One cached post. expires_at is epoch seconds from the cache clock."""
    key: str
    value: Any
    expires_at: float


class PostCache:
    """
    Mapping of canonical URL -> CacheEntry with lazy expiry.

    Safe to share between overlapping requests on one event loop: every
    operation is a single dict read, insert or delete.

    Args:
        default_ttl: TTL used when set() is called without one
        clock: Returns "now" in seconds; injectable for tests
    """

    def __init__(
        self,
        default_ttl: int | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.default_ttl = default_ttl if default_ttl is not None else settings.SOCIAL_CACHE_TTL_SECONDS
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def is_expired(self, entry: CacheEntry) -> bool:
        """An entry is stale once now is past its expiry."""
        return self._clock() > entry.expires_at

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on miss or expiry."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.is_expired(entry):
            logger.debug(f"Cache entry expired: {key}")
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: int | None = None) -> CacheEntry:
        """Store a value, replacing any previous entry for the key."""
        ttl = self.default_ttl if ttl is None else ttl
        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        self._entries[key] = entry
        return entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


# Process-wide cache shared by all requests
post_cache = PostCache()
