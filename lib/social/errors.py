# =============================================================================
# lib/social/errors.py - Link Resolution Errors
# =============================================================================
# FetchError is raised by every fetch path. The batch orchestrator converts
# it into a per-item FetchErrorDetail; the API layer maps its kind to an
# HTTP status code.
# =============================================================================

from __future__ import annotations

from core.models.social import FetchErrorDetail, FetchErrorKind, SupportedPlatform
from lib.utils import ApplicationError


_SUGGESTIONS: dict[FetchErrorKind, str] = {
    FetchErrorKind.INVALID_URL: "Pass an absolute http:// or https:// URL",
    FetchErrorKind.UNSUPPORTED_PLATFORM: "Use POST /social/fetch with the full URL instead",
    FetchErrorKind.UPSTREAM_ERROR: "The provider may be down, rate limiting, or the post was deleted. Try again later",
    FetchErrorKind.PARSE_ERROR: "The provider changed its response format; report the URL so the parser can be updated",
    FetchErrorKind.SERVER_ERROR: "Try again later or contact support if the issue persists",
}


class FetchError(ApplicationError):
    """
    Failure while resolving or fetching a link.

    Attributes:
        kind: FetchErrorKind category
        platform: Detected platform, when known
        status_code: Upstream HTTP status, when the provider answered

    Example:
        raise FetchError(
            FetchErrorKind.UPSTREAM_ERROR,
            "YouTube oEmbed returned 404",
            platform=SupportedPlatform.YOUTUBE,
            status_code=404,
        )
    """

    def __init__(
        self,
        kind: FetchErrorKind,
        message: str,
        platform: SupportedPlatform | None = None,
        status_code: int | None = None,
    ):
        details: dict[str, str | int] = {"kind": kind.value}
        if platform is not None:
            details["platform"] = platform.value
        if status_code is not None:
            details["upstream_status"] = status_code

        super().__init__(
            message,
            code=kind.value.upper(),
            suggestion=_SUGGESTIONS[kind],
            details=details,
        )
        self.kind = kind
        self.platform = platform
        self.status_code = status_code

    def to_detail(self) -> FetchErrorDetail:
        """Convert to the per-item error record used in batch results."""
        return FetchErrorDetail(
            kind=self.kind,
            message=self.message,
            platform=self.platform,
            status_code=self.status_code,
        )


class BatchSizeError(ApplicationError):
    """Raised when a batch is empty or exceeds the configured maximum."""

    def __init__(self, size: int, max_size: int):
        if size == 0:
            message = "At least one URL is required"
        else:
            message = f"Maximum {max_size} URLs per batch (got {size})"
        super().__init__(
            message,
            code="INVALID_BATCH_SIZE",
            suggestion=f"Send between 1 and {max_size} URLs per request",
            details={"size": size, "max_size": max_size},
        )
        self.size = size
        self.max_size = max_size
