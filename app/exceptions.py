# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# HTTP-facing errors and the handlers that turn them (and FetchError,
# BatchSizeError, request validation failures) into JSON bodies.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.models.social import FetchErrorKind
from lib.social.errors import BatchSizeError, FetchError
from lib.utils import ApplicationError


class LinkResolverException(ApplicationError):
    """
    Base exception for HTTP-only API errors.

    Domain failures raised below the API layer use FetchError; this class
    covers request problems the routers detect themselves.
    """

    def __init__(
        self,
        message: str,
        code: str = "LINK_RESOLVER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)
        self.status_code = status_code


# =============================================================================
# Request Exceptions
# =============================================================================

class UrlRequiredError(LinkResolverException):
    """Raised when a request has no URL to work on."""

    def __init__(self):
        super().__init__(
            message="URL is required",
            code="URL_REQUIRED",
            status_code=400,
            suggestion='Send a JSON body like {"url": "https://..."}',
        )


class UnsupportedPlatformError(LinkResolverException):
    """Raised when a post can't be addressed by platform + id."""

    def __init__(self, platform: str, post_id: str | None = None):
        details: dict[str, Any] = {"platform": platform}
        if post_id is not None:
            details["post_id"] = post_id
        super().__init__(
            message=f"Unsupported platform: {platform}",
            code="UNSUPPORTED_PLATFORM",
            status_code=400,
            suggestion="Use POST /social/fetch with the full post URL instead",
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

# HTTP status per fetch failure kind
FETCH_ERROR_STATUS: dict[FetchErrorKind, int] = {
    FetchErrorKind.INVALID_URL: 400,
    FetchErrorKind.UNSUPPORTED_PLATFORM: 400,
    FetchErrorKind.UPSTREAM_ERROR: 502,
    FetchErrorKind.PARSE_ERROR: 502,
    FetchErrorKind.SERVER_ERROR: 500,
}


async def link_resolver_exception_handler(
    request: Request,
    exc: LinkResolverException
) -> JSONResponse:
    """
    Send a LinkResolverException with its own status code.

    Body keys: detail, code, and suggestion/details when present.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def fetch_error_handler(
    request: Request,
    exc: FetchError
) -> JSONResponse:
    """Map a FetchError kind to its HTTP status."""
    return JSONResponse(
        status_code=FETCH_ERROR_STATUS.get(exc.kind, 500),
        content=exc.to_dict()
    )


async def batch_size_error_handler(
    request: Request,
    exc: BatchSizeError
) -> JSONResponse:
    """Empty or oversized batches are client errors."""
    return JSONResponse(
        status_code=400,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body validation errors.

    Missing or mistyped fields are reported as 400 with the offending
    locations, so clients see the same status as for a malformed URL.
    """
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }
    )
