# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# Wires the Link Resolver API together: logging, the shared upstream client,
# error translation and the versioned routers.
#
# Run locally:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    LinkResolverException,
    batch_size_error_handler,
    fetch_error_handler,
    link_resolver_exception_handler,
    validation_exception_handler,
)
from app.routers import health, social
from lib.social.errors import BatchSizeError, FetchError
from lib.social.fetchers import build_http_client, list_strategies

# Root logger; DEBUG follows settings.DEBUG
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the httpx.AsyncClient shared by every request."""
    logger.info(f"Starting Link Resolver API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Fetch strategies: {', '.join(list_strategies())}")

    app.state.http_client = build_http_client()

    yield

    logger.info("Shutting down Link Resolver API")
    await app.state.http_client.aclose()


app = FastAPI(
    title="Link Resolver API",
    description="""
## Social Link Resolution API

Turns links pasted into the workspace into rich post previews.

### Pipeline

1. **Detect** - The URL is matched against known platforms (18 supported)
2. **Fetch** - Metadata comes from the platform's oEmbed endpoint or API
3. **Fallback** - Anything else gets a generic OpenGraph preview
4. **Cache** - Results are cached per canonical URL

### Examples

```bash
# Resolve a link without fetching
curl -X POST http://localhost:8000/api/v1/social/resolve \\
  -H "Content-Type: application/json" \\
  -d '{"url": "https://youtu.be/dQw4w9WgXcQ"}'

# Fetch several posts at once
curl -X POST http://localhost:8000/api/v1/social/batch \\
  -H "Content-Type: application/json" \\
  -d '{"urls": ["https://github.com/fastapi/fastapi", "https://youtu.be/dQw4w9WgXcQ"]}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Social",
            "description": "Resolve and fetch social media posts from links",
        },
        {
            "name": "Health",
            "description": "Liveness and readiness probes",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# Any origin outside production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(LinkResolverException, link_resolver_exception_handler)
app.add_exception_handler(FetchError, fetch_error_handler)
app.add_exception_handler(BatchSizeError, batch_size_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Last-resort 500 for anything the typed handlers missed."""
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Probes
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Link resolution endpoints
app.include_router(
    social.router,
    prefix="/api/v1/social",
    tags=["Social"]
)


# =============================================================================
# Index
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """Service name plus links to docs and route groups."""
    return {
        "name": "Link Resolver API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
        "social": "/api/v1/social",
    }
