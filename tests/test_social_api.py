# =============================================================================
# tests/test_social_api.py - HTTP Endpoint Tests
# =============================================================================
# Exercises the routers through FastAPI's TestClient. The shared HTTP client
# and the post cache are swapped via dependency_overrides so providers are
# faked and every test starts with an empty cache.
# =============================================================================

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.dependencies import get_http_client, get_post_cache
from app.exceptions import LinkResolverException, UnsupportedPlatformError, UrlRequiredError
from app.main import app
from lib.social.cache import PostCache
from lib.utils import ApplicationError


@pytest.fixture
def api(upstream):
    """TestClient wired to the fake upstream and a fresh cache."""
    cache = PostCache()
    app.dependency_overrides[get_http_client] = upstream.client
    app.dependency_overrides[get_post_cache] = lambda: cache
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


# =============================================================================
# POST /social/resolve
# =============================================================================

class TestResolve:
    """Test POST /api/v1/social/resolve."""

    def test_supported_link(self, api):
        response = api.post("/api/v1/social/resolve", json={"url": "https://youtu.be/dQw4w9WgXcQ"})

        assert response.status_code == 200
        body = response.json()
        assert body["supported"] is True
        assert body["platform"] == "youtube"
        assert body["postId"] == "dQw4w9WgXcQ"
        assert body["params"]["is_short"] == "false"
        assert body["url"] == "https://youtu.be/dQw4w9WgXcQ"
        assert "fallback" not in body

    def test_unsupported_link(self, api):
        response = api.post("/api/v1/social/resolve", json={"url": "https://example.com/post"})

        assert response.status_code == 200
        assert response.json() == {
            "supported": False,
            "fallback": "opengraph",
            "url": "https://example.com/post",
        }

    def test_resolve_makes_no_upstream_calls(self, api, upstream):
        api.post("/api/v1/social/resolve", json={"url": "https://github.com/fastapi/fastapi"})
        assert upstream.requests == []

    def test_invalid_url(self, api):
        response = api.post("/api/v1/social/resolve", json={"url": "not a url"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_URL"
        assert "suggestion" in response.json()

    def test_blank_url(self, api):
        response = api.post("/api/v1/social/resolve", json={"url": "   "})

        assert response.status_code == 400
        assert response.json()["code"] == "URL_REQUIRED"

    def test_missing_url(self, api):
        response = api.post("/api/v1/social/resolve", json={})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"][0]["loc"] == ["body", "url"]

    def test_wrong_type(self, api):
        response = api.post("/api/v1/social/resolve", json={"url": 42})
        assert response.status_code == 400


# =============================================================================
# POST /social/fetch
# =============================================================================

class TestFetch:
    """Test POST /api/v1/social/fetch."""

    def test_fetch_post(self, api, upstream, youtube_oembed):
        upstream.add("youtube.com/oembed", json=youtube_oembed)

        response = api.post("/api/v1/social/fetch", json={"url": "https://youtu.be/dQw4w9WgXcQ"})

        assert response.status_code == 200
        body = response.json()
        assert body["platform"] == "youtube"
        assert body["videoId"] == "dQw4w9WgXcQ"
        assert body["isShort"] is False
        assert body["author"]["name"] == "Rick Astley"
        assert "fetchedAt" in body
        assert "expiresAt" in body

    def test_generic_fallback(self, api, upstream, article_html):
        upstream.add("news.example.com", html=article_html)

        response = api.post("/api/v1/social/fetch", json={"url": "https://news.example.com/a"})

        assert response.status_code == 200
        body = response.json()
        assert body["platform"] == "unknown"
        assert body["openGraph"]["siteName"] == "Example News"

    def test_invalid_url(self, api, upstream):
        response = api.post("/api/v1/social/fetch", json={"url": "ftp://example.com/file"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_URL"
        assert upstream.requests == []

    def test_upstream_failure(self, api, upstream):
        upstream.add("example.com", text="down", status=503)

        response = api.post("/api/v1/social/fetch", json={"url": "https://example.com/a"})

        assert response.status_code == 502
        body = response.json()
        assert body["code"] == "UPSTREAM_ERROR"
        assert body["details"]["upstream_status"] == 503

    def test_second_request_is_cached(self, api, upstream, youtube_oembed):
        upstream.add("youtube.com/oembed", json=youtube_oembed)

        first = api.post("/api/v1/social/fetch", json={"url": "https://youtu.be/dQw4w9WgXcQ"})
        second = api.post("/api/v1/social/fetch", json={"url": "https://youtu.be/dQw4w9WgXcQ"})

        assert first.json() == second.json()
        assert len(upstream.requests) == 1

    def test_cached_post_reports_requested_url(self, api, upstream, article_html):
        upstream.add("news.example.com", html=article_html)

        api.post("/api/v1/social/fetch", json={"url": "https://news.example.com/a?utm_source=newsletter"})
        response = api.post("/api/v1/social/fetch", json={"url": "https://news.example.com/a"})

        assert len(upstream.requests) == 1
        assert response.json()["url"] == "https://news.example.com/a"

    def test_malformed_provider_payload_falls_back(self, api, upstream, github_repo_payload):
        github_repo_payload["created_at"] = "yesterday-ish"
        upstream.add("api.github.com/repos/fastapi/fastapi", json=github_repo_payload)
        upstream.add("github.com/fastapi/fastapi", html='<meta property="og:title" content="fastapi/fastapi">')

        response = api.post("/api/v1/social/fetch", json={"url": "https://github.com/fastapi/fastapi"})

        assert response.status_code == 200
        body = response.json()
        assert body["platform"] == "unknown"
        assert body["sourcePlatform"] == "github"
        assert body["title"] == "fastapi/fastapi"


# =============================================================================
# GET /social/post/{platform}/{post_id}
# =============================================================================

class TestFetchById:
    """Test GET /api/v1/social/post/{platform}/{post_id}."""

    def test_github_repo_with_slash(self, api, upstream, github_repo_payload):
        upstream.add("api.github.com/repos/fastapi/fastapi", json=github_repo_payload)

        response = api.get("/api/v1/social/post/github/fastapi/fastapi")

        assert response.status_code == 200
        body = response.json()
        assert body["platform"] == "github"
        assert body["fullName"] == "fastapi/fastapi"
        assert body["url"] == "https://github.com/fastapi/fastapi"

    def test_youtube(self, api, upstream, youtube_oembed):
        upstream.add("youtube.com/oembed", json=youtube_oembed)

        response = api.get("/api/v1/social/post/youtube/dQw4w9WgXcQ")

        assert response.status_code == 200
        assert response.json()["url"] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    @pytest.mark.parametrize("path", [
        "/api/v1/social/post/myspace/123",
        "/api/v1/social/post/linkedin/7100000000000000000",
        "/api/v1/social/post/unknown/123",
    ])
    def test_unsupported_platform(self, api, upstream, path):
        response = api.get(path)

        assert response.status_code == 400
        assert response.json()["code"] == "UNSUPPORTED_PLATFORM"
        assert upstream.requests == []

    def test_unusable_post_id(self, api):
        response = api.get("/api/v1/social/post/youtube/a b")

        assert response.status_code == 400
        assert response.json()["details"]["post_id"] == "a b"


# =============================================================================
# POST /social/batch
# =============================================================================

class TestBatch:
    """Test POST /api/v1/social/batch."""

    def test_partial_failure_is_200(self, api, upstream, youtube_oembed):
        upstream.add("youtube.com/oembed", json=youtube_oembed)
        urls = ["https://youtu.be/dQw4w9WgXcQ", "not a url"]

        response = api.post("/api/v1/social/batch", json={"urls": urls})

        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["url"] for r in results] == urls
        assert results[0]["success"] is True
        assert results[0]["data"]["platform"] == "youtube"
        assert results[1]["success"] is False
        assert results[1]["error"]["kind"] == "invalid_url"

    @pytest.mark.parametrize("size", [0, 21])
    def test_size_bounds(self, api, upstream, size):
        urls = [f"https://example.com/{i}" for i in range(size)]

        response = api.post("/api/v1/social/batch", json={"urls": urls})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_BATCH_SIZE"
        assert upstream.requests == []

    def test_missing_urls(self, api):
        response = api.post("/api/v1/social/batch", json={"url": "https://example.com"})
        assert response.status_code == 400


# =============================================================================
# POST /social/scrape, GET /social/platforms
# =============================================================================

class TestScrape:
    """Test POST /api/v1/social/scrape."""

    def test_scrape(self, api, upstream, article_html):
        upstream.add("news.example.com", html=article_html)

        response = api.post("/api/v1/social/scrape", json={"url": "https://news.example.com/a"})

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Tom & Jerry return"
        assert body["imageWidth"] == 1200

    def test_scrape_failure(self, api, upstream):
        upstream.add("news.example.com", text="nope", status=404)

        response = api.post("/api/v1/social/scrape", json={"url": "https://news.example.com/a"})

        assert response.status_code == 502

    def test_scrape_invalid_url(self, api):
        response = api.post("/api/v1/social/scrape", json={"url": "nope"})
        assert response.status_code == 400


class TestPlatforms:
    """Test GET /api/v1/social/platforms."""

    def test_lists_detectable_platforms(self, api):
        response = api.get("/api/v1/social/platforms")

        assert response.status_code == 200
        platforms = {p["platform"]: p for p in response.json()}
        assert len(platforms) == 18
        assert "unknown" not in platforms
        assert platforms["youtube"]["hasOembed"] is True
        assert platforms["linkedin"]["hasOembed"] is False
        assert platforms["github"]["name"] == "GitHub"


# =============================================================================
# Health & Root
# =============================================================================

class TestHealth:
    """Test health endpoints."""

    def test_health(self, api):
        response = api.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_live(self, api):
        assert api.get("/api/v1/health/live").json()["status"] == "alive"

    def test_ready_without_backend(self, api, monkeypatch):
        monkeypatch.setattr(settings, "SUPABASE_URL", None)

        body = api.get("/api/v1/health/ready").json()

        assert body["status"] == "ready"
        assert body["checks"]["database"] == "not_configured"
        assert body["checks"]["http_client"] == "healthy"

    def test_ready_with_unreachable_backend(self, api, monkeypatch):
        from lib.supabase_client import SupabaseClient, SupabaseClientError

        def fail():
            raise SupabaseClientError("Supabase is unreachable: refused", code="BACKEND_UNREACHABLE")

        monkeypatch.setattr(settings, "SUPABASE_URL", "https://test-project.supabase.co")
        monkeypatch.setattr(settings, "SUPABASE_SERVICE_KEY", "test-service-key")
        monkeypatch.setattr(SupabaseClient, "ping", fail)

        body = api.get("/api/v1/health/ready").json()

        assert body["status"] == "degraded"
        assert body["checks"]["database"].startswith("unhealthy")

    def test_unconfigured_client_raises(self, monkeypatch):
        from lib.supabase_client import SupabaseClient, SupabaseClientError

        monkeypatch.setattr(settings, "SUPABASE_URL", None)
        SupabaseClient.reset()

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseClient.get_client()
        assert exc_info.value.code == "CLIENT_NOT_CONFIGURED"

    def test_root(self, api):
        body = api.get("/").json()
        assert body["social"] == "/api/v1/social"


# =============================================================================
# Error types
# =============================================================================

class TestRequestErrors:
    """Test the HTTP-only error classes."""

    def test_share_the_application_error_base(self):
        for error in (UrlRequiredError(), UnsupportedPlatformError("myspace")):
            assert isinstance(error, LinkResolverException)
            assert isinstance(error, ApplicationError)
            assert error.status_code == 400

    def test_unsupported_platform_body(self):
        body = UnsupportedPlatformError("myspace", "42").to_dict()

        assert body["code"] == "UNSUPPORTED_PLATFORM"
        assert body["details"] == {"platform": "myspace", "post_id": "42"}
        assert "suggestion" in body
