# =============================================================================
# tests/test_platform_detector.py - Platform Detection Tests
# =============================================================================
# This module contains tests for:
# - URL validation
# - Platform + post id detection for every supported URL shape
# - Derived params (content types, YouTube Shorts)
# - Canonical URL normalization (cache keys)
# =============================================================================

import pytest

from core.models.social import SupportedPlatform as P
from lib.social.platform_detector import (
    PLATFORM_INFO,
    detect_platform,
    get_github_content_type,
    get_platform_info,
    get_spotify_content_type,
    is_social_media_url,
    is_valid_url,
    is_youtube_short,
    normalize_url,
)


# =============================================================================
# Validation
# =============================================================================

class TestIsValidUrl:
    """Test is_valid_url."""

    @pytest.mark.parametrize("url", [
        "https://github.com/fastapi/fastapi",
        "http://example.com",
        "  https://example.com/path?q=1  ",
        "HTTPS://EXAMPLE.COM",
    ])
    def test_accepts_http_urls(self, url):
        assert is_valid_url(url) is True

    @pytest.mark.parametrize("url", [
        "",
        "   ",
        "not a url",
        "example.com/path",
        "ftp://example.com/file",
        "javascript:alert(1)",
        "https://",
        "https://exa mple.com",
        None,
        123,
    ])
    def test_rejects_everything_else(self, url):
        assert is_valid_url(url) is False

    def test_invalid_url_is_not_detected(self):
        assert detect_platform("not a url") is None


# =============================================================================
# Detection
# =============================================================================

class TestDetectPlatform:
    """Test detect_platform against real URL shapes."""

    @pytest.mark.parametrize("url,platform,post_id", [
        ("https://twitter.com/jack/status/20", P.TWITTER, "20"),
        ("https://x.com/elonmusk/status/1585341984679469056", P.TWITTER, "1585341984679469056"),
        ("https://mobile.twitter.com/jack/status/20", P.TWITTER, "20"),
        ("https://twitter.com/i/web/status/20", P.TWITTER, "20"),
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", P.YOUTUBE, "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ", P.YOUTUBE, "dQw4w9WgXcQ"),
        ("https://youtu.be/dQw4w9WgXcQ", P.YOUTUBE, "dQw4w9WgXcQ"),
        ("https://www.youtube.com/embed/dQw4w9WgXcQ", P.YOUTUBE, "dQw4w9WgXcQ"),
        ("https://www.instagram.com/p/CxYz123AbC/", P.INSTAGRAM, "CxYz123AbC"),
        ("https://www.instagram.com/reel/CxYz123AbC/?igsh=abc", P.INSTAGRAM, "CxYz123AbC"),
        ("https://www.instagram.com/stories/natgeo/3141592653/", P.INSTAGRAM, "3141592653"),
        ("https://www.linkedin.com/feed/update/urn:li:activity:7100000000000000000", P.LINKEDIN, "7100000000000000000"),
        ("https://www.tiktok.com/@scout2015/video/6718335390845095173", P.TIKTOK, "6718335390845095173"),
        ("https://vm.tiktok.com/ZMabc123/", P.TIKTOK, "ZMabc123"),
        ("https://www.threads.net/@zuck/post/CuXFPIeLLod", P.THREADS, "CuXFPIeLLod"),
        ("https://bsky.app/profile/jay.bsky.team/post/3k2abcxyz", P.BLUESKY, "3k2abcxyz"),
        ("https://www.facebook.com/zuck/posts/10114029315870881", P.FACEBOOK, "10114029315870881"),
        ("https://www.reddit.com/r/python/comments/abc123/some_title/", P.REDDIT, "abc123"),
        ("https://old.reddit.com/r/python/comments/abc123/", P.REDDIT, "abc123"),
        ("https://www.reddit.com/r/python/s/XyZ789", P.REDDIT, "XyZ789"),
        ("https://www.reddit.com/comments/abc123", P.REDDIT, "abc123"),
        ("https://redd.it/abc123", P.REDDIT, "abc123"),
        ("https://www.pinterest.com/pin/123456789/", P.PINTEREST, "123456789"),
        ("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC", P.SPOTIFY, "4uLU6hMCjMI75M1A2tKUQC"),
        ("https://open.spotify.com/intl-de/album/1DFixLWuPkv3KT3TnV35m3", P.SPOTIFY, "1DFixLWuPkv3KT3TnV35m3"),
        ("https://github.com/fastapi/fastapi", P.GITHUB, "fastapi/fastapi"),
        ("https://github.com/fastapi/fastapi/", P.GITHUB, "fastapi/fastapi"),
        ("https://github.com/pydantic/pydantic-settings/issues/42", P.GITHUB, "pydantic/pydantic-settings"),
        ("https://gist.github.com/octocat/aa5a315d61ae9438b18d", P.GITHUB, "aa5a315d61ae9438b18d"),
        ("https://medium.com/@ada/the-analytical-engine-3f2a1b", P.MEDIUM, "3f2a1b"),
        ("https://stratechery.substack.com/p/aggregation-theory", P.SUBSTACK, "aggregation-theory"),
        ("https://vimeo.com/76979871", P.VIMEO, "76979871"),
        ("https://player.vimeo.com/video/76979871", P.VIMEO, "76979871"),
        ("https://clips.twitch.tv/FunnyClipSlug-abc", P.TWITCH, "FunnyClipSlug-abc"),
        ("https://soundcloud.com/forss/flickermood", P.SOUNDCLOUD, "flickermood"),
        ("https://mastodon.social/@Gargron/109999999999999999", P.MASTODON, "109999999999999999"),
    ])
    def test_detects_platform_and_post_id(self, url, platform, post_id):
        result = detect_platform(url)

        assert result is not None
        assert result.platform == platform
        assert result.post_id == post_id

    @pytest.mark.parametrize("url", [
        "https://example.com/article",
        "https://www.reddit.com/r/python/",
        "https://news.ycombinator.com/item?id=1",
        "https://twitter.com/jack",
    ])
    def test_unknown_links_return_none(self, url):
        assert detect_platform(url) is None
        assert is_social_media_url(url) is False

    def test_surrounding_whitespace_is_ignored(self):
        result = detect_platform("  https://youtu.be/dQw4w9WgXcQ\n")
        assert result.post_id == "dQw4w9WgXcQ"

    def test_twitter_params_include_username(self):
        result = detect_platform("https://twitter.com/jack/status/20")
        assert result.params["username"] == "jack"

    def test_reddit_params_include_subreddit(self):
        result = detect_platform("https://www.reddit.com/r/python/comments/abc123/some_title/")
        assert result.params["subreddit"] == "python"

    def test_youtube_short_flag(self):
        short = detect_platform("https://www.youtube.com/shorts/abc123DEF45")
        video = detect_platform("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

        assert short.platform == P.YOUTUBE
        assert short.post_id == "abc123DEF45"
        assert short.params["is_short"] == "true"
        assert video.params["is_short"] == "false"

    def test_spotify_content_type_param(self):
        result = detect_platform("https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M")
        assert result.params["content_type"] == "playlist"
        assert "contentType" not in result.params

    @pytest.mark.parametrize("url,content_type", [
        ("https://github.com/fastapi/fastapi", "repo"),
        ("https://github.com/fastapi/fastapi/issues/1", "issue"),
        ("https://github.com/fastapi/fastapi/pull/2", "pull"),
        ("https://github.com/fastapi/fastapi/discussions/3", "discussion"),
        ("https://gist.github.com/octocat/aa5a315d61ae9438b18d", "gist"),
    ])
    def test_github_content_type_param(self, url, content_type):
        assert detect_platform(url).params["content_type"] == content_type

    def test_mastodon_params(self):
        result = detect_platform("https://fosstodon.org/@kushal/111111111111111111")
        assert result.platform == P.MASTODON
        assert result.params["instance"] == "fosstodon.org"
        assert result.params["username"] == "kushal"

    def test_result_is_immutable(self):
        result = detect_platform("https://vimeo.com/76979871")
        with pytest.raises(Exception):
            result.post_id = "other"

    def test_result_serializes_with_camel_case(self):
        result = detect_platform("https://vimeo.com/76979871")
        assert result.model_dump(by_alias=True)["postId"] == "76979871"


# =============================================================================
# Helpers
# =============================================================================

class TestContentTypeHelpers:
    """Test the content-type helpers."""

    def test_spotify_content_type(self):
        assert get_spotify_content_type("https://open.spotify.com/episode/abc") == "episode"
        assert get_spotify_content_type("https://spotify.link/abc") is None

    def test_github_content_type(self):
        assert get_github_content_type("https://github.com/a/b") == "repo"
        assert get_github_content_type("https://github.com/a/b/blob/main/x.py") is None

    def test_youtube_short(self):
        assert is_youtube_short("https://www.youtube.com/shorts/abc") is True
        assert is_youtube_short("https://youtu.be/abc") is False


class TestNormalizeUrl:
    """Test normalize_url (the cache key)."""

    def test_strips_tracking_params(self):
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ&utm_source=newsletter&si=abc"
        assert normalize_url(url) == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    def test_rewrites_x_to_twitter(self):
        assert normalize_url("https://x.com/jack/status/20?s=20") == "https://twitter.com/jack/status/20"

    def test_keeps_other_query_params(self):
        assert normalize_url("https://example.com/a?page=2") == "https://example.com/a?page=2"

    def test_keeps_share_style_params_on_ordinary_pages(self):
        assert normalize_url("https://blog.example.com/?s=foo") == "https://blog.example.com/?s=foo"
        assert normalize_url("https://blog.example.com/?s=foo") != normalize_url("https://blog.example.com/?s=bar")
        assert normalize_url("https://example.com/a?t=2&utm_source=x") == "https://example.com/a?t=2"

    def test_strips_share_tokens_on_platform_links(self):
        url = "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=abc123"
        assert normalize_url(url) == "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC"

    def test_strips_whitespace(self):
        assert normalize_url("  https://example.com/a  ") == "https://example.com/a"

    def test_twitter_and_x_share_a_key(self):
        assert normalize_url("https://x.com/jack/status/20") == normalize_url("https://twitter.com/jack/status/20")


class TestPlatformInfo:
    """Test display info lookup."""

    def test_every_platform_has_info(self):
        for platform in P:
            assert platform in PLATFORM_INFO

    def test_get_platform_info(self):
        assert get_platform_info(P.GITHUB) == ("GitHub", "#333333")
