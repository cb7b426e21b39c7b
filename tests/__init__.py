# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Link Resolver API:
# - test_platform_detector.py / test_oembed.py: URL detection and rebuilding
# - test_opengraph.py / test_cache.py: Parser and cache units
# - test_fetchers.py: Strategies, fallback, errors, batch (mocked upstream)
# - test_social_api.py: Endpoint tests through TestClient
# - test_models.py: Pydantic model validation
#
# Run tests with: pytest
# =============================================================================
