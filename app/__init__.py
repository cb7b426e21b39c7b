# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the Link Resolver web application:
# - main.py: App entry point, lifespan (shared HTTP client), error handlers
# - config.py: Environment variable loading and settings
# - exceptions.py: HTTP error types and FetchError -> status mapping
# - dependencies.py: Injected HTTP client and post cache
# - routers/: Social and health endpoints
#
# Routes only translate HTTP to service calls; link resolution itself lives
# in core/services and lib/social.
# =============================================================================
