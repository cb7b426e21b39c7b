# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - FakeUpstream: scripted providers behind httpx.MockTransport, so no test
#   ever touches the network
# - Sample provider payloads
# =============================================================================

import asyncio
import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SOCIAL_FETCH_TIMEOUT_SECONDS", "2")

import httpx
import pytest

from lib.social.cache import PostCache


# =============================================================================
# Fake Upstream
# =============================================================================

class FakeUpstream:
    """
    Scripted HTTP upstream.

    Routes match when their `match` string is a substring of the request
    URL; the first match wins. Unmatched requests get a 404. Every request
    is recorded, and the peak number of concurrent requests is tracked.

    Example:
        upstream = FakeUpstream()
        upstream.add("youtube.com/oembed", json={"title": "Video"})
        async with upstream.client() as http:
            ...
    """

    def __init__(self):
        self.routes: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def add(
        self,
        match: str,
        *,
        json=None,
        text: str | None = None,
        html: str | None = None,
        status: int = 200,
        delay: float = 0.0,
        timeout: bool = False,
    ) -> "FakeUpstream":
        self.routes.append({
            "match": match,
            "json": json,
            "text": text,
            "html": html,
            "status": status,
            "delay": delay,
            "timeout": timeout,
        })
        return self

    def calls_to(self, match: str) -> int:
        return sum(1 for r in self.requests if match in str(r.url))

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            route = next((r for r in self.routes if r["match"] in str(request.url)), None)
            if route is None:
                return httpx.Response(404, text="not found")
            if route["delay"]:
                await asyncio.sleep(route["delay"])
            if route["timeout"]:
                raise httpx.ReadTimeout("timed out", request=request)
            if route["json"] is not None:
                return httpx.Response(route["status"], json=route["json"])
            if route["html"] is not None:
                return httpx.Response(
                    route["status"],
                    text=route["html"],
                    headers={"content-type": "text/html; charset=utf-8"},
                )
            return httpx.Response(route["status"], text=route["text"] or "")
        finally:
            self.in_flight -= 1

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def upstream():
    """Empty fake upstream; tests add the routes they need."""
    return FakeUpstream()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Fresh cache per test, driven by the fake clock."""
    return PostCache(clock=clock)


@pytest.fixture
def youtube_oembed():
    """YouTube oEmbed response."""
    return {
        "title": "Rick Astley - Never Gonna Give You Up (Official Music Video)",
        "author_name": "Rick Astley",
        "author_url": "https://www.youtube.com/@RickAstleyYT",
        "type": "video",
        "provider_name": "YouTube",
        "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        "html": '<iframe width="560" height="315" src="https://www.youtube.com/embed/dQw4w9WgXcQ"></iframe>',
    }


@pytest.fixture
def twitter_oembed():
    """Twitter oEmbed response."""
    return {
        "url": "https://twitter.com/jack/status/20",
        "author_name": "jack",
        "author_url": "https://twitter.com/jack",
        "html": (
            '<blockquote class="twitter-tweet"><p lang="en" dir="ltr">just setting up my twttr</p>'
            '&mdash; jack (@jack) <a href="https://twitter.com/jack/status/20">March 21, 2006</a>'
            "</blockquote>"
        ),
        "provider_name": "Twitter",
    }


@pytest.fixture
def github_repo_payload():
    """GitHub REST API repository response (trimmed)."""
    return {
        "id": 160919119,
        "name": "fastapi",
        "full_name": "fastapi/fastapi",
        "private": False,
        "owner": {
            "login": "fastapi",
            "avatar_url": "https://avatars.githubusercontent.com/u/156354296?v=4",
            "html_url": "https://github.com/fastapi",
        },
        "description": "FastAPI framework, high performance, easy to learn",
        "language": "Python",
        "topics": ["api", "async", "python"],
        "license": {"key": "mit", "spdx_id": "MIT"},
        "stargazers_count": 80000,
        "forks_count": 6800,
        "watchers_count": 80000,
        "open_issues_count": 150,
        "default_branch": "master",
        "created_at": "2018-12-08T08:21:47Z",
        "updated_at": "2024-05-01T10:00:00Z",
    }


@pytest.fixture
def article_html():
    """Generic article page with OpenGraph tags."""
    return """
    <html>
      <head>
        <title>Fallback title</title>
        <meta property="og:title" content="Tom &amp; Jerry return">
        <meta property="og:description" content="A cartoon comeback.">
        <meta property="og:image" content="/images/cover.png">
        <meta property="og:image:width" content="1200">
        <meta property="og:image:height" content="630">
        <meta property="og:site_name" content="Example News">
        <meta property="og:type" content="article">
        <meta name="author" content="Ada Lovelace">
        <meta property="article:published_time" content="2024-05-01T09:00:00Z">
        <meta name="twitter:card" content="summary_large_image">
        <meta name="twitter:site" content="@examplenews">
      </head>
      <body><p>Hello</p></body>
    </html>
    """
